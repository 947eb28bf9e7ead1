"""Encoding detection and decoding for raw XML byte input.

Detection runs in two stages: a byte-order mark wins outright, otherwise the
``encoding`` pseudo-attribute of the XML declaration is sniffed from the raw
bytes. Documents that declare a non-UTF-8 encoding are handed to the caller's
charset hook when one is supplied.
"""

import codecs
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, ClassVar, Dict, Optional

from xmlx.shared.errors import XMLSyntaxError

# Signature of a caller-supplied decoder: (declared charset, raw bytes) -> text
CharsetFunc = Callable[[str, bytes], str]

DEFAULT_ENCODING = "utf-8"
DECLARATION_SAMPLE_SIZE = 1024

_UTF8_LABELS = frozenset({"utf-8", "utf8"})


class DetectionMethod(Enum):
    """How the encoding of a document was determined."""
    BOM = "bom"
    XML_DECLARATION = "xml_declaration"
    DEFAULT = "default"


@dataclass
class EncodingResult:
    """Result of encoding detection.

    Attributes:
        encoding: Encoding label (as declared, or canonical for a BOM)
        method: Detection method used
        bom_length: Number of leading bytes occupied by a byte-order mark
    """
    encoding: str
    method: DetectionMethod
    bom_length: int = 0

    @property
    def is_utf8(self) -> bool:
        return self.encoding.lower() in _UTF8_LABELS


class BOMDetector:
    """Byte Order Mark (BOM) detection for the Unicode encodings."""

    BOM_PATTERNS: ClassVar[Dict[bytes, str]] = {
        codecs.BOM_UTF8: "utf-8",
        codecs.BOM_UTF32_LE: "utf-32-le",
        codecs.BOM_UTF32_BE: "utf-32-be",
        codecs.BOM_UTF16_LE: "utf-16-le",
        codecs.BOM_UTF16_BE: "utf-16-be",
    }

    def detect(self, data: bytes) -> Optional[EncodingResult]:
        """Detect encoding based on BOM.

        Args:
            data: Byte data to analyze

        Returns:
            EncodingResult if BOM detected, None otherwise
        """
        if not data:
            return None

        # UTF-32 LE starts with the UTF-16 LE mark, so longer patterns go first
        for bom_bytes, encoding in sorted(
            self.BOM_PATTERNS.items(), key=lambda item: len(item[0]), reverse=True
        ):
            if data.startswith(bom_bytes):
                return EncodingResult(
                    encoding=encoding,
                    method=DetectionMethod.BOM,
                    bom_length=len(bom_bytes)
                )
        return None


class XMLDeclarationParser:
    """Parser for XML encoding declarations."""

    XML_DECLARATION_PATTERN = re.compile(
        rb'^\s*<\?xml\s[^>]*?encoding\s*=\s*["\']([A-Za-z][A-Za-z0-9._-]*)["\']'
    )

    def parse_declaration(self, data: bytes) -> Optional[EncodingResult]:
        """Parse encoding from XML declaration.

        Args:
            data: Byte data to analyze

        Returns:
            EncodingResult if a declaration names an encoding, None otherwise
        """
        if not data:
            return None

        match = self.XML_DECLARATION_PATTERN.match(data[:DECLARATION_SAMPLE_SIZE])
        if not match:
            return None

        return EncodingResult(
            encoding=match.group(1).decode("ascii"),
            method=DetectionMethod.XML_DECLARATION
        )


def detect_encoding(data: bytes) -> EncodingResult:
    """Determine the encoding of raw XML bytes.

    Args:
        data: Complete document bytes

    Returns:
        EncodingResult; UTF-8 when neither a BOM nor a declaration says otherwise
    """
    result = BOMDetector().detect(data)
    if result is not None:
        return result

    result = XMLDeclarationParser().parse_declaration(data)
    if result is not None:
        return result

    return EncodingResult(encoding=DEFAULT_ENCODING, method=DetectionMethod.DEFAULT)


def decode_document(data: bytes, charset: Optional[CharsetFunc] = None) -> str:
    """Decode raw XML bytes to text.

    Args:
        data: Complete document bytes
        charset: Optional hook called as ``charset(label, data)`` when the
            document declares an encoding other than UTF-8

    Returns:
        Decoded document text, without any byte-order mark

    Raises:
        XMLSyntaxError: If the declared encoding is unknown or the bytes do not
            decode
    """
    detected = detect_encoding(data)

    if detected.method is DetectionMethod.BOM:
        return _decode(data[detected.bom_length:], detected.encoding)

    if detected.is_utf8:
        return _decode(data, DEFAULT_ENCODING)

    if charset is not None:
        return charset(detected.encoding, data)

    try:
        codecs.lookup(detected.encoding)
    except LookupError:
        raise XMLSyntaxError(
            f"encoding {detected.encoding!r} declared but no charset decoder "
            f"is available"
        ) from None
    return _decode(data, detected.encoding)


def _decode(data: bytes, encoding: str) -> str:
    try:
        return data.decode(encoding)
    except UnicodeDecodeError as e:
        raise XMLSyntaxError(
            f"invalid {encoding} byte sequence at offset {e.start}"
        ) from e
