"""Namespace alias table.

Maps a declared namespace URI to the short alias used in rewritten qualified
names. The table is flat: it only ever grows while a document is parsed, and
a later declaration of the same URI replaces the alias of an earlier one.
"""

from collections.abc import Mapping
from typing import Dict, Iterator, Optional

from xmlx.shared.names import Attribute, QualifiedName

XMLNS_PREFIX = "xmlns"


class NamespaceTable(Mapping):
    """Read-only mapping of namespace URI to alias, grown through ``declare``."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._aliases: Dict[str, str] = dict(initial or {})

    def __getitem__(self, uri: str) -> str:
        return self._aliases[uri]

    def __iter__(self) -> Iterator[str]:
        return iter(self._aliases)

    def __len__(self) -> int:
        return len(self._aliases)

    def __repr__(self) -> str:
        return f"NamespaceTable({self._aliases!r})"

    def declare(self, uri: str, alias: str) -> None:
        """Register ``alias`` as the short form of ``uri``."""
        self._aliases[uri] = alias

    def declare_attribute(self, attribute: Attribute) -> bool:
        """Register the declaration carried by an ``xmlns`` attribute.

        ``xmlns="uri"`` declares the empty alias, ``xmlns:p="uri"`` declares
        alias ``p``.

        Returns:
            True if the attribute was a namespace declaration
        """
        name = attribute.name
        if name.space == "" and name.local == XMLNS_PREFIX:
            self.declare(attribute.value, "")
            return True
        if name.space == XMLNS_PREFIX:
            self.declare(attribute.value, name.local)
            return True
        return False

    def resolve(self, space: str) -> str:
        """Alias for a namespace URI; unknown spaces come back unchanged."""
        return self._aliases.get(space, space)

    def rewrite(self, name: QualifiedName) -> QualifiedName:
        """Return ``name`` with its space replaced by the resolved alias."""
        return name.with_space(self.resolve(name.space))

    def uri_for(self, alias: str) -> Optional[str]:
        """Most recently declared URI using ``alias``, or None."""
        found = None
        for uri, known in self._aliases.items():
            if known == alias:
                found = uri
        return found

    def copy(self) -> "NamespaceTable":
        return NamespaceTable(self._aliases)
