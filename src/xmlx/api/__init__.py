"""Public API for xmlx.

Key Components:
    Document: Load, query and save a whole XML document
    parse, parse_string, parse_file: One-call loading helpers
    Integration adapters: Conversion to and from lxml and ElementTree
"""

from .adapters import (
    AdapterMetadata,
    ConversionResult,
    ElementTreeAdapter,
    IntegrationAdapter,
    LxmlAdapter,
    get_adapter,
    list_adapters,
    register_adapter,
)
from .document import Document
from .entities import EXTENDED_ENTITIES, load_extended_entities
from .parser import new, parse, parse_file, parse_string

__all__ = [
    "EXTENDED_ENTITIES",
    "AdapterMetadata",
    "ConversionResult",
    "Document",
    "ElementTreeAdapter",
    "IntegrationAdapter",
    "LxmlAdapter",
    "get_adapter",
    "list_adapters",
    "load_extended_entities",
    "new",
    "parse",
    "parse_file",
    "parse_string",
    "register_adapter",
]
