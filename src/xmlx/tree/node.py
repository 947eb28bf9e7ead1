"""Node type for the xmlx document tree.

A single ``Node`` class covers every kind of tree entity; ``type`` says which
fields are meaningful. Children are owned by their parent in an ordered list,
while the link back to the parent is a weak reference and never keeps a
subtree alive on its own.
"""

import weakref
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional

from xmlx.shared.names import Attribute, QualifiedName

if TYPE_CHECKING:
    from xmlx.shared.config import SerializerConfig


class NodeType(Enum):
    """Kinds of node in the document tree."""

    ROOT = auto()        # Synthetic anchor for the top-level siblings
    ELEMENT = auto()     # <name attr="v">...</name>
    TEXT = auto()        # Character data
    COMMENT = auto()     # <!--value-->
    DIRECTIVE = auto()   # <!value>
    PROC_INST = auto()   # <?target value?>


_CONTAINER_TYPES = (NodeType.ROOT, NodeType.ELEMENT)


class Node:
    """A node in the document tree.

    Attributes:
        type: Which kind of node this is
        name: Qualified name (elements only)
        attributes: Attributes in document order (elements only)
        value: Text for text, comment, directive and processing instruction nodes
        target: Target of a processing instruction
        children: Child nodes in document order
    """

    def __init__(
        self,
        type: NodeType,
        name: Optional[QualifiedName] = None,
        attributes: Optional[List[Attribute]] = None,
        value: str = "",
        target: str = ""
    ) -> None:
        self.type = type
        self.name = name if name is not None else QualifiedName()
        self.attributes: List[Attribute] = attributes if attributes is not None else []
        self.value = value
        self.target = target
        self.children: List["Node"] = []
        self._parent: Optional["weakref.ReferenceType[Node]"] = None

    @classmethod
    def root(cls) -> "Node":
        return cls(NodeType.ROOT)

    @classmethod
    def element(
        cls, name: QualifiedName, attributes: Optional[List[Attribute]] = None
    ) -> "Node":
        return cls(NodeType.ELEMENT, name=name, attributes=attributes)

    @classmethod
    def text_node(cls, value: str) -> "Node":
        return cls(NodeType.TEXT, value=value)

    @classmethod
    def comment(cls, value: str) -> "Node":
        return cls(NodeType.COMMENT, value=value)

    @classmethod
    def directive(cls, value: str) -> "Node":
        return cls(NodeType.DIRECTIVE, value=value)

    @classmethod
    def proc_inst(cls, target: str, value: str) -> "Node":
        return cls(NodeType.PROC_INST, target=target, value=value)

    @property
    def parent(self) -> Optional["Node"]:
        """The node this one is attached to, or None for a root or detached node."""
        if self._parent is None:
            return None
        return self._parent()

    @property
    def is_element(self) -> bool:
        return self.type is NodeType.ELEMENT

    @property
    def depth(self) -> int:
        """Number of ancestors above this node."""
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    @property
    def text(self) -> str:
        """Concatenated character data of this node and all its descendants."""
        return "".join(
            node.value for node in self.iter() if node.type is NodeType.TEXT
        )

    def add_child(self, child: "Node") -> None:
        """Append a newly created node as the last child.

        Raises:
            TypeError: If child is not a Node
            ValueError: If this node cannot hold children, or child is a root
                or is already attached elsewhere
        """
        if not isinstance(child, Node):
            raise TypeError("Child must be a Node instance")
        if self.type not in _CONTAINER_TYPES:
            raise ValueError(f"{self.type.name} nodes cannot have children")
        if child.type is NodeType.ROOT:
            raise ValueError("A root node cannot be attached as a child")
        if child.parent is not None:
            raise ValueError("Child is already attached to a parent")

        child._parent = weakref.ref(self)
        self.children.append(child)

    def iter(self) -> Iterator["Node"]:
        """Iterate over this node and its descendants in document order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def get_attribute(
        self, namespace: str, name: str, default: Optional[str] = None
    ) -> Optional[str]:
        """Value of the first attribute named ``(namespace, name)``."""
        for attribute in self.attributes:
            if attribute.name.space == namespace and attribute.name.local == name:
                return attribute.value
        return default

    def has_attribute(self, namespace: str, name: str) -> bool:
        return any(
            attribute.name.space == namespace and attribute.name.local == name
            for attribute in self.attributes
        )

    def select_node(self, namespace: str, name: str) -> Optional["Node"]:
        """First direct child element named ``(namespace, name)``, or None."""
        from .query import select_node
        return select_node(self, namespace, name)

    def select_nodes(self, namespace: str, name: str) -> List["Node"]:
        """All direct child elements named ``(namespace, name)``."""
        from .query import select_nodes
        return select_nodes(self, namespace, name)

    def select_nodes_recursive(self, namespace: str, name: str) -> List["Node"]:
        """All descendant elements named ``(namespace, name)``, at any depth."""
        from .query import select_nodes_recursive
        return select_nodes_recursive(self, namespace, name)

    def to_bytes(self, config: Optional["SerializerConfig"] = None) -> bytes:
        """Serialize this node and its subtree."""
        from .serializer import XMLSerializer
        return XMLSerializer(config).serialize(self)

    def to_dict(self) -> Dict[str, Any]:
        """Structural snapshot of this subtree, without parent links."""
        result: Dict[str, Any] = {"type": self.type.name.lower()}

        if self.type is NodeType.ELEMENT:
            result["space"] = self.name.space
            result["local"] = self.name.local
            result["attributes"] = [
                {
                    "space": attribute.name.space,
                    "local": attribute.name.local,
                    "value": attribute.value,
                }
                for attribute in self.attributes
            ]
        elif self.type is NodeType.PROC_INST:
            result["target"] = self.target
            result["value"] = self.value
        elif self.type is not NodeType.ROOT:
            result["value"] = self.value

        if self.type in _CONTAINER_TYPES:
            result["children"] = [child.to_dict() for child in self.children]
        return result

    def __str__(self) -> str:
        return self.to_bytes().decode("utf-8")

    def __repr__(self) -> str:
        if self.type is NodeType.ELEMENT:
            return f"<Node ELEMENT {self.name} children={len(self.children)}>"
        if self.type is NodeType.ROOT:
            return f"<Node ROOT children={len(self.children)}>"
        if self.type is NodeType.PROC_INST:
            return f"<Node PROC_INST {self.target!r}>"
        return f"<Node {self.type.name} {self.value!r}>"
