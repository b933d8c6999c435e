"""Immutable value tree for parsed TOML documents.

Every node is one of seven closed variants. The ``kind`` class attribute
is the discriminant the diff engine matches on; two values of different
kinds never compare equal, even where Python would coerce them
(``1 == 1.0``, ``True == 1``).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
import math
from typing import Any, ClassVar, Iterator, cast

from deltapack.core.types import ValueKind


@dataclass(frozen=True, slots=True)
class String:
    value: str

    kind: ClassVar[ValueKind] = "string"


@dataclass(frozen=True, slots=True)
class Integer:
    value: int

    kind: ClassVar[ValueKind] = "integer"


@dataclass(frozen=True, slots=True, eq=False)
class Float:
    value: float

    kind: ClassVar[ValueKind] = "float"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Float):
            return NotImplemented
        if math.isnan(self.value) and math.isnan(other.value):
            return True
        return self.value == other.value

    def __hash__(self) -> int:
        if math.isnan(self.value):
            return hash(("float", "nan"))
        return hash(("float", self.value))


@dataclass(frozen=True, slots=True)
class Boolean:
    value: bool

    kind: ClassVar[ValueKind] = "boolean"


@dataclass(frozen=True, slots=True, eq=False)
class Datetime:
    """Offset/local date-time, local date, or local time.

    Equality compares the written form, not the instant: the same moment
    at a different offset, or a local date-time against an offset one,
    is a different value.
    """

    value: datetime | date | time

    kind: ClassVar[ValueKind] = "datetime"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Datetime):
            return NotImplemented
        return self._written_form() == other._written_form()

    def __hash__(self) -> int:
        return hash(("datetime", self._written_form()))

    def _written_form(self) -> tuple[str, str]:
        return type(self.value).__name__, self.value.isoformat()


@dataclass(frozen=True, slots=True, eq=False)
class Array:
    items: tuple[Value, ...] = ()

    kind: ClassVar[ValueKind] = "array"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Array):
            return NotImplemented
        return values_equal(self, other)

    def __hash__(self) -> int:
        return hash(("array", self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.items)


@dataclass(frozen=True, slots=True, eq=False)
class Table:
    """Mapping of unique string keys to values; equality ignores entry order."""

    entries: tuple[tuple[str, Value], ...] = ()

    kind: ClassVar[ValueKind] = "table"

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for key, _ in self.entries:
            if key in seen:
                raise ValueError(f"Duplicate table key: {key!r}")
            seen.add(key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Table):
            return NotImplemented
        return values_equal(self, other)

    def __hash__(self) -> int:
        return hash(("table", tuple(self.sorted_entries())))

    def __len__(self) -> int:
        return len(self.entries)

    def keys(self) -> list[str]:
        return [key for key, _ in self.entries]

    def get(self, key: str, default: Value | None = None) -> Value | None:
        for entry_key, value in self.entries:
            if entry_key == key:
                return value
        return default

    def sorted_entries(self) -> list[tuple[str, Value]]:
        return sorted(self.entries, key=lambda entry: entry[0])


Value = String | Integer | Float | Boolean | Datetime | Array | Table


def values_equal(left: Value, right: Value) -> bool:
    """Structural equality without recursion, so depth is not bounded by the call stack."""
    stack: list[tuple[Value, Value]] = [(left, right)]
    while stack:
        a, b = stack.pop()
        if a.kind != b.kind:
            return False
        if isinstance(a, Table):
            other_table = cast(Table, b)
            if len(a.entries) != len(other_table.entries):
                return False
            other = dict(other_table.entries)
            for key, item in a.entries:
                if key not in other:
                    return False
                stack.append((item, other[key]))
        elif isinstance(a, Array):
            other_array = cast(Array, b)
            if len(a.items) != len(other_array.items):
                return False
            stack.extend(zip(a.items, other_array.items))
        elif a != b:
            return False
    return True


def is_container(value: Value) -> bool:
    return value.kind == "array" or value.kind == "table"


def from_python(obj: Any) -> Value:
    """Convert parser output (as produced by ``tomllib``) into a value tree."""
    if isinstance(obj, bool):
        return Boolean(obj)
    if isinstance(obj, int):
        return Integer(obj)
    if isinstance(obj, float):
        return Float(obj)
    if isinstance(obj, str):
        return String(obj)
    if isinstance(obj, (datetime, date, time)):
        return Datetime(obj)
    if isinstance(obj, (list, tuple)):
        return Array(tuple(from_python(item) for item in obj))
    if isinstance(obj, dict):
        entries: list[tuple[str, Value]] = []
        for key, item in obj.items():
            if not isinstance(key, str):
                raise TypeError(f"Table keys must be strings, got {type(key).__name__}")
            entries.append((key, from_python(item)))
        return Table(tuple(entries))
    raise TypeError(f"Unsupported value type: {type(obj).__name__}")


def to_python(value: Value) -> Any:
    """Convert a value tree back into plain Python objects."""
    if isinstance(value, Table):
        return {key: to_python(item) for key, item in value.entries}
    if isinstance(value, Array):
        return [to_python(item) for item in value.items]
    return value.value
