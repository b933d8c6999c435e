"""Core value tree and deterministic primitives for TomlDelta."""

from deltapack.core.canonical import canonical_json, canonicalize
from deltapack.core.paths import format_key, is_within, join_index, join_key
from deltapack.core.types import SCALAR_KINDS, VALUE_KINDS, ValueKind
from deltapack.core.values import (
    Array,
    Boolean,
    Datetime,
    Float,
    Integer,
    String,
    Table,
    Value,
    from_python,
    is_container,
    to_python,
    values_equal,
)

__all__ = [
    "Value",
    "String",
    "Integer",
    "Float",
    "Boolean",
    "Datetime",
    "Array",
    "Table",
    "ValueKind",
    "VALUE_KINDS",
    "SCALAR_KINDS",
    "from_python",
    "to_python",
    "values_equal",
    "is_container",
    "canonicalize",
    "canonical_json",
    "format_key",
    "join_key",
    "join_index",
    "is_within",
]
