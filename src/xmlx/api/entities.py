"""Extended named-entity table.

XML itself only predefines ``lt``, ``gt``, ``amp``, ``apos`` and ``quot``.
Documents written with HTML habits often use names such as ``&nbsp;`` or
``&eacute;`` without declaring them; loading this table lets the tokenizer
substitute the full HTML 4 character entity set
(http://www.w3.org/TR/html4/sgml/entities.html).
"""

from html.entities import name2codepoint
from typing import Dict, MutableMapping

EXTENDED_ENTITIES: Dict[str, str] = {
    name: chr(codepoint) for name, codepoint in name2codepoint.items()
}


def load_extended_entities(entity: MutableMapping[str, str]) -> int:
    """Add the extended entity set to ``entity``.

    Entries already present are overwritten.

    Returns:
        Number of entities added or replaced
    """
    entity.update(EXTENDED_ENTITIES)
    return len(EXTENDED_ENTITIES)
