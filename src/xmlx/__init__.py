"""xmlx: an in-memory XML document tree.

Loads XML from strings, bytes, files, streams or URLs into a tree of nodes,
finds elements by namespace and local name, and writes the tree back out as
XML with an optional declaration and indentation.

Progressive API Disclosure:
- Level 1: Simple functions - new(), parse(), parse_string(), parse_file()
- Level 2: Document class - every load/save operation and document settings
- Level 3: Building blocks - XMLTokenizer, TreeBuilder, XMLSerializer
"""

__version__ = "0.1.0"

# Level 1 and 2
from .api import Document, new, parse, parse_file, parse_string

# Value types, configuration and errors
from .shared import (
    Attribute,
    QualifiedName,
    SerializerConfig,
    XMLSyntaxError,
    XMLxError,
    configure_logging,
)

# Level 3
from .tokenization import XMLTokenizer
from .tree import NamespaceTable, Node, NodeType, TreeBuilder, XMLSerializer

__all__ = [
    "__version__",

    # Simple functions
    "new",
    "parse",
    "parse_string",
    "parse_file",

    # Document
    "Document",

    # Tree and value types
    "Node",
    "NodeType",
    "QualifiedName",
    "Attribute",
    "NamespaceTable",

    # Configuration and errors
    "SerializerConfig",
    "XMLxError",
    "XMLSyntaxError",
    "configure_logging",

    # Building blocks
    "XMLTokenizer",
    "TreeBuilder",
    "XMLSerializer",
]
