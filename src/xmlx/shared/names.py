"""Name and attribute value types shared by the tokenizer and the tree.

A qualified name is a ``(space, local)`` pair. While tokens are produced the
``space`` field carries a namespace URI (or a raw prefix when the prefix was
never declared); once the tree builder has rewritten it through the document's
namespace table it carries the short alias instead.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class QualifiedName:
    """A ``(space, local)`` pair identifying an element or attribute."""

    space: str = ""
    local: str = ""

    @classmethod
    def parse(cls, raw: str) -> "QualifiedName":
        """Split ``prefix:local`` text into a name.

        A colon at either end of the text is not treated as a separator.
        """
        index = raw.find(":")
        if 0 < index < len(raw) - 1:
            return cls(raw[:index], raw[index + 1:])
        return cls("", raw)

    def with_space(self, space: str) -> "QualifiedName":
        """Return a copy of this name carrying a different space."""
        if space == self.space:
            return self
        return QualifiedName(space, self.local)

    def __str__(self) -> str:
        if self.space:
            return f"{self.space}:{self.local}"
        return self.local


@dataclass
class Attribute:
    """A single attribute in document order."""

    name: QualifiedName = field(default_factory=QualifiedName)
    value: str = ""

    def copy(self) -> "Attribute":
        return Attribute(self.name, self.value)
