"""Module-level entry points for xmlx.

Progressive disclosure: ``parse()`` and friends cover the common case of
"give me a document for this input"; the ``Document`` class exposes the full
set of load and save operations and the document-level settings.
"""

from pathlib import Path
from typing import BinaryIO, Dict, Optional, TextIO, Union

from xmlx.character import CharsetFunc
from xmlx.shared import get_logger

from .document import Document

# Type definitions for input data
InputType = Union[str, bytes, BinaryIO, TextIO, Path]


def new() -> Document:
    """Create an empty document with default settings.

    Examples:
        >>> new().save_string()
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    """
    return Document()


def parse(
    input_data: InputType,
    charset: Optional[CharsetFunc] = None,
    entity: Optional[Dict[str, str]] = None,
    correlation_id: Optional[str] = None
) -> Document:
    """Parse XML from various input sources with automatic type detection.

    Strings and bytes are treated as XML content, ``Path`` objects as files,
    and anything with a ``read`` method as a stream.

    Args:
        input_data: XML content, a Path, or a readable stream
        charset: Decoder for byte input declaring a non-UTF-8 encoding
        entity: Extra named entities to recognise
        correlation_id: Optional correlation ID for request tracking

    Returns:
        The loaded Document

    Raises:
        XMLSyntaxError: If the input is not well-formed
        TypeError: If the input type is not supported

    Examples:
        >>> parse('<root><item>value</item></root>').select_node("", "root").text
        'value'
        >>> parse(b'<?xml version="1.0" standalone="no"?><root/>').standalone
        'no'
    """
    logger = get_logger(__name__, correlation_id, "parse")
    logger.debug(
        "Starting universal parse operation",
        extra={"input_type": type(input_data).__name__}
    )

    document = Document(entity=entity, correlation_id=correlation_id)
    if isinstance(input_data, str):
        document.load_string(input_data)
    elif isinstance(input_data, bytes):
        document.load_bytes(input_data, charset)
    elif isinstance(input_data, Path):
        document.load_file(input_data, charset)
    elif hasattr(input_data, "read"):
        document.load_stream(input_data, charset)
    else:
        raise TypeError(f"Unable to parse input of type {type(input_data).__name__}")
    return document


def parse_string(
    xml_string: str,
    entity: Optional[Dict[str, str]] = None,
    correlation_id: Optional[str] = None
) -> Document:
    """Parse XML from a string.

    Examples:
        >>> doc = parse_string('<root><item id="1">Hello</item></root>')
        >>> doc.select_nodes_recursive("", "item")[0].get_attribute("", "id")
        '1'
    """
    document = Document(entity=entity, correlation_id=correlation_id)
    document.load_string(xml_string)
    return document


def parse_file(
    file_path: Union[str, Path],
    charset: Optional[CharsetFunc] = None,
    entity: Optional[Dict[str, str]] = None,
    correlation_id: Optional[str] = None
) -> Document:
    """Parse XML from a file.

    Raises:
        OSError: If the file cannot be read
        XMLSyntaxError: If the content is not well-formed
    """
    document = Document(entity=entity, correlation_id=correlation_id)
    document.load_file(Path(file_path), charset)
    return document
