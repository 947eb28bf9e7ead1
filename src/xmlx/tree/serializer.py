"""XML serialization of node trees.

Two layouts are supported. With an empty indent prefix the tree is written
exactly as stored, so loading the output again gives back an equal tree. With
a non-empty prefix every block-level node goes on its own line, indented once
per depth level; whitespace-only text between blocks is dropped, and elements
that hold real text are written on one line so their content is untouched.
"""

from dataclasses import dataclass
from typing import List, Optional, Union

from xmlx.shared.config import SerializerConfig

from .node import Node, NodeType

_TEXT_ESCAPES = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&apos;",
    "\r": "&#13;",
})

_ATTRIBUTE_ESCAPES = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&apos;",
    "\t": "&#9;",
    "\n": "&#10;",
    "\r": "&#13;",
})

OUTPUT_ENCODING = "utf-8"


def escape_text(value: str) -> str:
    """Escape character data for use between tags."""
    return value.translate(_TEXT_ESCAPES)


def escape_attribute(value: str) -> str:
    """Escape an attribute value for use inside double quotes."""
    return value.translate(_ATTRIBUTE_ESCAPES)


@dataclass(frozen=True)
class XMLDeclaration:
    """Fields written into the ``<?xml ...?>`` line."""

    version: str = "1.0"
    encoding: str = "UTF-8"
    standalone: str = "yes"

    def render(self) -> str:
        return (
            f'<?xml version="{self.version}" encoding="{self.encoding}" '
            f'standalone="{self.standalone}"?>'
        )


def _is_blank_text(node: Node) -> bool:
    return node.type is NodeType.TEXT and not node.value.strip()


class XMLSerializer:
    """Writes node trees as XML.

    Example:
        >>> from xmlx.shared.names import QualifiedName
        >>> root = Node.root()
        >>> root.add_child(Node.element(QualifiedName("", "a")))
        >>> XMLSerializer().serialize(root)
        b'<a/>'
    """

    def __init__(self, config: Optional[SerializerConfig] = None) -> None:
        self.config = config if config is not None else SerializerConfig()

    def serialize(
        self, node: Node, declaration: Optional[XMLDeclaration] = None
    ) -> bytes:
        """Serialize ``node`` (a root serializes its children) to UTF-8 bytes."""
        return self.serialize_to_string(node, declaration).encode(OUTPUT_ENCODING)

    def serialize_to_string(
        self, node: Node, declaration: Optional[XMLDeclaration] = None
    ) -> str:
        out: List[str] = []
        if declaration is not None:
            out.append(declaration.render())
            if self.config.is_pretty:
                out.append("\n")

        if self.config.is_pretty:
            self._write_block(node, 0, out)
        else:
            self._write_inline(node, out)
        return "".join(out)

    def _write_inline(self, node: Node, out: List[str]) -> None:
        # Closing tags are pushed as strings between the nodes still to visit
        stack: List[Union[Node, str]] = [node]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                out.append(item)
            elif item.type is NodeType.ROOT:
                stack.extend(reversed(item.children))
            elif item.type is NodeType.ELEMENT:
                if not item.children and self.config.self_close_empty:
                    out.append(self._open_tag(item) + "/>")
                else:
                    out.append(self._open_tag(item) + ">")
                    stack.append(f"</{item.name}>")
                    stack.extend(reversed(item.children))
            else:
                out.append(self._leaf(item))

    def _write_block(self, node: Node, depth: int, out: List[str]) -> None:
        if node.type is NodeType.ROOT:
            for child in node.children:
                self._write_block(child, depth, out)
            return
        if _is_blank_text(node):
            return

        indent = self.config.indent_prefix * depth
        if node.type is not NodeType.ELEMENT:
            out.append(f"{indent}{self._leaf(node).strip()}\n")
            return

        content = [child for child in node.children if not _is_blank_text(child)]
        if not content:
            if self.config.self_close_empty:
                out.append(f"{indent}{self._open_tag(node)}/>\n")
            else:
                out.append(f"{indent}{self._open_tag(node)}></{node.name}>\n")
        elif any(child.type is NodeType.TEXT for child in content):
            out.append(f"{indent}{self._open_tag(node)}>")
            for child in node.children:
                self._write_inline(child, out)
            out.append(f"</{node.name}>\n")
        else:
            out.append(f"{indent}{self._open_tag(node)}>\n")
            for child in content:
                self._write_block(child, depth + 1, out)
            out.append(f"{indent}</{node.name}>\n")

    def _open_tag(self, node: Node) -> str:
        parts = [f"<{node.name}"]
        for attribute in node.attributes:
            parts.append(f' {attribute.name}="{escape_attribute(attribute.value)}"')
        return "".join(parts)

    def _leaf(self, node: Node) -> str:
        if node.type is NodeType.TEXT:
            return escape_text(node.value)
        if node.type is NodeType.COMMENT:
            return f"<!--{node.value}-->"
        if node.type is NodeType.DIRECTIVE:
            return f"<!{node.value}>"
        if node.value:
            return f"<?{node.target} {node.value}?>"
        return f"<?{node.target}?>"
