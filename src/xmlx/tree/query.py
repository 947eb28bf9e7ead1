"""Qualified-name queries over a node subtree.

All lookups compare both the space and the local part of an element name for
exact equality, after namespace alias resolution. Nothing is indexed, so each
call walks the part of the subtree it needs.
"""

from typing import Iterator, List, Optional

from .node import Node, NodeType


def matches(node: Node, namespace: str, name: str) -> bool:
    """Whether ``node`` is an element named exactly ``(namespace, name)``."""
    return (
        node.type is NodeType.ELEMENT
        and node.name.space == namespace
        and node.name.local == name
    )


def select_node(node: Node, namespace: str, name: str) -> Optional[Node]:
    """First direct child of ``node`` matching ``(namespace, name)``, or None."""
    for child in node.children:
        if matches(child, namespace, name):
            return child
    return None


def select_nodes(node: Node, namespace: str, name: str) -> List[Node]:
    """All direct children of ``node`` matching ``(namespace, name)``.

    Matching children are not searched further, nor are non-matching ones.
    """
    return [child for child in node.children if matches(child, namespace, name)]


def iter_descendants(node: Node) -> Iterator[Node]:
    """Descendants of ``node`` in depth-first pre-order, excluding ``node``."""
    stack = list(reversed(node.children))
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def iter_elements(node: Node) -> Iterator[Node]:
    """Descendant elements of ``node`` in document order."""
    return (child for child in iter_descendants(node) if child.is_element)


def select_nodes_recursive(node: Node, namespace: str, name: str) -> List[Node]:
    """All descendants of ``node`` matching ``(namespace, name)``.

    The search continues below a matching element, so nested matches are
    returned as well, in document order.
    """
    return [
        element for element in iter_elements(node)
        if element.name.space == namespace and element.name.local == name
    ]
