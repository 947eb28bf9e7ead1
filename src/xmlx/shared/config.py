"""Configuration classes for xmlx.

Serialization used to be steered by a process-wide indentation variable; here
it is an explicit object handed to the serializer, so two callers with
different layouts never interfere.
"""

import json
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict

DEFAULT_PRETTY_PREFIX = "  "


@dataclass(frozen=True)
class SerializerConfig:
    """Layout options for XML output.

    Attributes:
        indent_prefix: String repeated once per depth level. Empty means the
            output is fully minified.
        self_close_empty: Emit childless elements as ``<name/>``.
    """

    indent_prefix: str = ""
    self_close_empty: bool = True

    def __post_init__(self) -> None:
        """Validate serializer configuration."""
        if not isinstance(self.indent_prefix, str):
            raise TypeError("indent_prefix must be a string")
        if not isinstance(self.self_close_empty, bool):
            raise TypeError("self_close_empty must be a bool")

    @property
    def is_pretty(self) -> bool:
        return bool(self.indent_prefix)

    @classmethod
    def compact(cls) -> "SerializerConfig":
        """Create configuration producing minified output."""
        return cls()

    @classmethod
    def pretty(cls, prefix: str = DEFAULT_PRETTY_PREFIX) -> "SerializerConfig":
        """Create configuration producing one block-level node per line."""
        if not prefix:
            raise ValueError("pretty output needs a non-empty indent prefix")
        return cls(indent_prefix=prefix)

    def override(self, **kwargs: Any) -> "SerializerConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SerializerConfig":
        """Build a configuration from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    @classmethod
    def from_json(cls, json_str: str) -> "SerializerConfig":
        return cls.from_dict(json.loads(json_str))
