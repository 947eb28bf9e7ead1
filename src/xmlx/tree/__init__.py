"""Document tree for xmlx.

This module provides the node tree, the namespace alias table, the builder
that constructs trees from token streams, the qualified-name query engine and
the serializer.

Key Components:
    Node: Tree entity (root, element, text, comment, directive, PI)
    NamespaceTable: Namespace URI to alias mapping built during parsing
    TreeBuilder: Builds node trees from token streams
    XMLSerializer: Writes node trees back out as XML
"""

from .builder import BuildResult, TreeBuilder
from .namespaces import NamespaceTable
from .node import Node, NodeType
from .query import (
    iter_elements,
    select_node,
    select_nodes,
    select_nodes_recursive,
)
from .serializer import XMLDeclaration, XMLSerializer, escape_attribute, escape_text

__all__ = [
    "BuildResult",
    "NamespaceTable",
    "Node",
    "NodeType",
    "TreeBuilder",
    "XMLDeclaration",
    "XMLSerializer",
    "escape_attribute",
    "escape_text",
    "iter_elements",
    "select_node",
    "select_nodes",
    "select_nodes_recursive",
]
