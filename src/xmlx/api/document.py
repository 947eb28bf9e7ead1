"""Document façade for xmlx.

A ``Document`` owns one node tree plus the document-level settings used when
it is written back out. Every ``load_*`` method replaces the tree (and the
namespace table built with it); every ``save_*`` method serializes the
current tree without modifying it.

Example:
    >>> doc = Document()
    >>> doc.load_string('<a><b>text</b><b>more</b></a>')
    >>> [node.text for node in doc.select_node("", "a").select_nodes("", "b")]
    ['text', 'more']
"""

import io
import os
import time
from typing import BinaryIO, Dict, List, Optional, TextIO, Union

import requests

from xmlx.character import CharsetFunc, decode_document
from xmlx.shared import SerializerConfig, get_logger
from xmlx.tokenization import XMLTokenizer
from xmlx.tree import (
    NamespaceTable,
    Node,
    TreeBuilder,
    XMLDeclaration,
    XMLSerializer,
    select_node,
    select_nodes,
    select_nodes_recursive,
)

from .entities import load_extended_entities

PathType = Union[str, "os.PathLike[str]"]

DEFAULT_VERSION = "1.0"
DEFAULT_ENCODING = "UTF-8"
DEFAULT_STANDALONE = "yes"
SAVE_FILE_MODE = 0o600


class Document:
    """An XML document held entirely in memory.

    Attributes:
        version: Version written into the XML declaration
        encoding: Encoding name written into the XML declaration
        standalone: ``standalone`` value of the XML declaration; updated by a
            load when the loaded prolog declares one
        entity: Extra named entities recognised while loading
        namespaces: Namespace alias table built by the last load
        root: Synthetic root owning the whole tree
        save_doctype: Whether saving writes the XML declaration
        serializer_config: Layout used by the ``save_*`` methods
    """

    def __init__(
        self,
        version: str = DEFAULT_VERSION,
        encoding: str = DEFAULT_ENCODING,
        standalone: str = DEFAULT_STANDALONE,
        save_doctype: bool = True,
        entity: Optional[Dict[str, str]] = None,
        serializer_config: Optional[SerializerConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.version = version
        self.encoding = encoding
        self.standalone = standalone
        self.save_doctype = save_doctype
        self.entity: Dict[str, str] = dict(entity) if entity else {}
        self.namespaces = NamespaceTable()
        self.root = Node.root()
        self.serializer_config = (
            serializer_config if serializer_config is not None else SerializerConfig()
        )
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "document")

    def load_extended_entity_map(self) -> None:
        """Recognise the HTML 4 named character entities while loading.

        Setting only the entities a document needs through ``entity`` is
        cheaper; this loads the whole set.
        """
        count = load_extended_entities(self.entity)
        self.logger.debug("Extended entity map loaded", extra={"entities": count})

    # Queries

    def select_node(self, namespace: str, name: str) -> Optional[Node]:
        """First top-level element named ``(namespace, name)``, or None."""
        return select_node(self.root, namespace, name)

    def select_nodes(self, namespace: str, name: str) -> List[Node]:
        """All top-level elements named ``(namespace, name)``."""
        return select_nodes(self.root, namespace, name)

    def select_nodes_recursive(self, namespace: str, name: str) -> List[Node]:
        """All elements in the document named ``(namespace, name)``."""
        return select_nodes_recursive(self.root, namespace, name)

    # Loading

    def load_stream(
        self,
        stream: Union[BinaryIO, TextIO],
        charset: Optional[CharsetFunc] = None
    ) -> None:
        """Replace the content of this document with the XML read from ``stream``.

        Args:
            stream: Readable binary or text stream; read to the end
            charset: Decoder used when binary input declares a non-UTF-8
                encoding; called as ``charset(label, data)``

        Raises:
            XMLSyntaxError: If the input is not well-formed. The document
                then holds a partial tree that should not be used.
        """
        data = stream.read()
        if isinstance(data, str):
            text = data
        else:
            text = decode_document(data, charset)
        self._load_text(text)

    def load_bytes(self, data: bytes, charset: Optional[CharsetFunc] = None) -> None:
        """Replace the content of this document with the XML in ``data``."""
        self.load_stream(io.BytesIO(data), charset)

    def load_string(self, text: str, charset: Optional[CharsetFunc] = None) -> None:
        """Replace the content of this document with the XML in ``text``.

        The text is already decoded, so ``charset`` is never consulted.
        """
        self.load_stream(io.StringIO(text), charset)

    def load_file(
        self, filename: PathType, charset: Optional[CharsetFunc] = None
    ) -> None:
        """Replace the content of this document with the XML file at ``filename``."""
        with open(filename, "rb") as fd:
            self.load_stream(fd, charset)

    def load_uri(
        self,
        uri: str,
        charset: Optional[CharsetFunc] = None,
        client: Optional[requests.Session] = None,
        timeout: Optional[float] = None
    ) -> None:
        """Replace the content of this document with the XML fetched from ``uri``.

        Args:
            uri: HTTP(S) URL to fetch
            charset: Decoder for non-UTF-8 documents, as for ``load_stream``
            client: Session to issue the request with; a one-off request is
                made when omitted
            timeout: Request timeout in seconds

        Raises:
            requests.RequestException: If the request fails or returns an
                error status
        """
        getter = client.get if client is not None else requests.get
        response = getter(uri, timeout=timeout)
        try:
            response.raise_for_status()
            self.load_bytes(response.content, charset)
        finally:
            response.close()

    def _load_text(self, text: str) -> None:
        start_time = time.time()
        self.logger.info(
            "Starting document load",
            extra={"content_length": len(text), "entities": len(self.entity)}
        )

        self.root = Node.root()
        self.namespaces = NamespaceTable()
        result = TreeBuilder(self.correlation_id).build(
            XMLTokenizer(text, self.entity),
            root=self.root,
            namespaces=self.namespaces
        )
        if result.standalone is not None:
            self.standalone = result.standalone

        self.logger.info(
            "Document load completed",
            extra={
                "nodes_created": result.nodes_created,
                "namespaces": len(self.namespaces),
                "processing_time_ms": (time.time() - start_time) * 1000,
            }
        )

    # Saving

    def save_bytes(self, config: Optional[SerializerConfig] = None) -> bytes:
        """Serialize this document to UTF-8 bytes.

        Args:
            config: Layout to use instead of ``serializer_config``
        """
        declaration = None
        if self.save_doctype:
            declaration = XMLDeclaration(self.version, self.encoding, self.standalone)
        if config is None:
            config = self.serializer_config
        return XMLSerializer(config).serialize(self.root, declaration)

    def save_string(self, config: Optional[SerializerConfig] = None) -> str:
        """Serialize this document to a string."""
        return self.save_bytes(config).decode("utf-8")

    def save_stream(
        self, writer: BinaryIO, config: Optional[SerializerConfig] = None
    ) -> None:
        """Write the serialized document to a binary stream."""
        writer.write(self.save_bytes(config))

    def save_file(
        self, path: PathType, config: Optional[SerializerConfig] = None
    ) -> None:
        """Write the serialized document to ``path``.

        A new file is created readable and writable by its owner only.
        """
        data = self.save_bytes(config)
        flags = os.O_WRONLY | os.O_CREAT | os.O_TRUNC
        fd = os.open(os.fspath(path), flags, SAVE_FILE_MODE)
        with os.fdopen(fd, "wb") as out:
            out.write(data)

    def __str__(self) -> str:
        return self.save_string()

    def __repr__(self) -> str:
        return (
            f"<Document version={self.version!r} encoding={self.encoding!r} "
            f"children={len(self.root.children)}>"
        )
