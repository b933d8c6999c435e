"""Type definitions for TomlDelta core values."""

from typing import Literal

ValueKind = Literal[
    "string",
    "integer",
    "float",
    "boolean",
    "datetime",
    "array",
    "table",
]

VALUE_KINDS: tuple[str, ...] = (
    "string",
    "integer",
    "float",
    "boolean",
    "datetime",
    "array",
    "table",
)

SCALAR_KINDS: frozenset[str] = frozenset(
    {"string", "integer", "float", "boolean", "datetime"}
)
