"""Core tree building implementation for xmlx.

This module turns a token stream into a linked node tree anchored at a
synthetic root, rewriting qualified names through the namespace alias table
as elements are created.

Construction is lenient about structure: an end tag seen while
the cursor is at the root finishes the build (the rest of the input is never
read), and elements still open when the stream ends are accepted as they are.
Lexical errors raised by the tokenizer propagate unchanged.
"""

import time
from dataclasses import dataclass
from typing import Iterable, Optional

from xmlx.shared import get_logger
from xmlx.shared.names import Attribute
from xmlx.tokenization import Token, TokenType

from .namespaces import NamespaceTable
from .node import Node, NodeType

XML_DECLARATION_TARGET = "xml"
STANDALONE_MARKER = 'standalone="'


@dataclass
class BuildResult:
    """Outcome of one tree build.

    Attributes:
        root: Synthetic root owning the whole tree
        namespaces: Alias table populated by the namespace declarations seen
        standalone: ``standalone`` value of the XML declaration, if it had one
        stopped_at_root: True when an end tag at document level ended the build
        nodes_created: Number of nodes attached below the root
        processing_time_ms: Wall time spent building
    """

    root: Node
    namespaces: NamespaceTable
    standalone: Optional[str] = None
    stopped_at_root: bool = False
    nodes_created: int = 0
    processing_time_ms: float = 0.0

    @property
    def element_count(self) -> int:
        return sum(1 for node in self.root.iter() if node.is_element)


def parse_standalone(declaration: str) -> Optional[str]:
    """Extract the ``standalone`` value from XML declaration content.

    Only the double-quoted form is recognised. A missing closing quote takes
    the rest of the content rather than raising; the declaration is read for
    this one value and is not otherwise validated.
    """
    index = declaration.find(STANDALONE_MARKER)
    if index < 0:
        return None
    rest = declaration[index + len(STANDALONE_MARKER):]
    end = rest.find('"')
    return rest if end < 0 else rest[:end]


class TreeBuilder:
    """Builds node trees from token streams.

    Example:
        >>> from xmlx.tokenization import XMLTokenizer
        >>> result = TreeBuilder().build(XMLTokenizer("<a><b/></a>"))
        >>> result.root.children[0].children[0].name.local
        'b'
    """

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        """Initialize tree builder.

        Args:
            correlation_id: Optional correlation ID for request tracking
        """
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tree_builder")

    def build(
        self,
        tokens: Iterable[Token],
        root: Optional[Node] = None,
        namespaces: Optional[NamespaceTable] = None
    ) -> BuildResult:
        """Build a tree from a token stream.

        Args:
            tokens: XML events in document order
            root: Empty root to populate; a new one is created when omitted
            namespaces: Alias table to extend; a new one is created when omitted

        Returns:
            BuildResult holding the root and the namespace table

        Raises:
            XMLSyntaxError: Propagated from the token stream
            ValueError: If ``root`` is not a root node
        """
        start_time = time.time()
        if root is None:
            root = Node.root()
        elif root.type is not NodeType.ROOT:
            raise ValueError("Tree building needs a ROOT node to start from")

        result = BuildResult(
            root=root,
            namespaces=namespaces if namespaces is not None else NamespaceTable()
        )
        current = root

        for token in tokens:
            kind = token.type
            if kind is TokenType.START_ELEMENT:
                element = self._create_element(token, result.namespaces)
                current.add_child(element)
                current = element
                result.nodes_created += 1
            elif kind is TokenType.END_ELEMENT:
                parent = current.parent
                if parent is None:
                    result.stopped_at_root = True
                    self.logger.debug(
                        "End element at document level, ignoring remaining input",
                        extra={"element": str(token.name)}
                    )
                    break
                current = parent
            elif kind is TokenType.CHAR_DATA:
                current.add_child(Node.text_node(token.value))
                result.nodes_created += 1
            elif kind is TokenType.COMMENT:
                current.add_child(Node.comment(token.value.strip()))
                result.nodes_created += 1
            elif kind is TokenType.DIRECTIVE:
                current.add_child(Node.directive(token.value.strip()))
                result.nodes_created += 1
            elif kind is TokenType.PROC_INST:
                if token.target == XML_DECLARATION_TARGET:
                    standalone = parse_standalone(token.value.strip())
                    if standalone is not None:
                        result.standalone = standalone
                else:
                    current.add_child(
                        Node.proc_inst(token.target.strip(), token.value.strip())
                    )
                    result.nodes_created += 1

        result.processing_time_ms = (time.time() - start_time) * 1000
        self.logger.debug(
            "Tree building completed",
            extra={
                "nodes_created": result.nodes_created,
                "namespaces": len(result.namespaces),
                "stopped_at_root": result.stopped_at_root,
                "processing_time_ms": result.processing_time_ms,
            }
        )
        return result

    def _create_element(self, token: Token, namespaces: NamespaceTable) -> Node:
        attributes = [Attribute(attr.name, attr.value) for attr in token.attributes]

        for attribute in attributes:
            namespaces.declare_attribute(attribute)
        for attribute in attributes:
            attribute.name = namespaces.rewrite(attribute.name)

        return Node.element(namespaces.rewrite(token.name), attributes)
