"""Character layer for xmlx.

Turns raw document bytes into text: byte-order marks, declared encodings and
the caller's charset hook are handled here, before tokenization.
"""

from .encoding import (
    BOMDetector,
    CharsetFunc,
    DetectionMethod,
    EncodingResult,
    XMLDeclarationParser,
    decode_document,
    detect_encoding,
)

__all__ = [
    "BOMDetector",
    "CharsetFunc",
    "DetectionMethod",
    "EncodingResult",
    "XMLDeclarationParser",
    "decode_document",
    "detect_encoding",
]
