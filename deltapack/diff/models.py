"""Data models for document change sets."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterator, Literal

from deltapack.core.canonical import canonicalize
from deltapack.core.paths import trailing_index
from deltapack.core.values import Value

ChangeStatus = Literal["same", "added", "deleted", "changed"]

CHANGE_STATUSES: tuple[str, ...] = ("same", "added", "deleted", "changed")


@dataclass(frozen=True, slots=True)
class Same:
    """Values at a location are structurally equal."""

    status: ClassVar[ChangeStatus] = "same"

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status}


@dataclass(frozen=True, slots=True)
class Added:
    """Present in the new document only."""

    key: str
    value: Value

    status: ClassVar[ChangeStatus] = "added"

    @property
    def position(self) -> int | None:
        return trailing_index(self.key)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "key": self.key,
            "value": canonicalize(self.value),
        }


@dataclass(frozen=True, slots=True)
class Deleted:
    """Present in the old document only."""

    key: str
    value: Value

    status: ClassVar[ChangeStatus] = "deleted"

    @property
    def position(self) -> int | None:
        return trailing_index(self.key)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "key": self.key,
            "value": canonicalize(self.value),
        }


@dataclass(frozen=True, slots=True)
class Changed:
    """Same location in both documents with a different kind or scalar value."""

    key: str
    old: Value
    new: Value

    status: ClassVar[ChangeStatus] = "changed"

    @property
    def position(self) -> int | None:
        return trailing_index(self.key)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "key": self.key,
            "old_kind": self.old.kind,
            "new_kind": self.new.kind,
            "old": canonicalize(self.old),
            "new": canonicalize(self.new),
        }


Change = Same | Added | Deleted | Changed


@dataclass(slots=True)
class ChangeSet(Sequence):
    """Ordered changes between two documents, in discovery order."""

    changes: list[Change] = field(default_factory=list)

    def __iter__(self) -> Iterator[Change]:
        return iter(self.changes)

    def __len__(self) -> int:
        return len(self.changes)

    def __getitem__(self, index: int | slice) -> Change | list[Change]:
        return self.changes[index]

    @property
    def identical(self) -> bool:
        return all(change.status == "same" for change in self.changes)

    @property
    def differences(self) -> list[Added | Deleted | Changed]:
        return [change for change in self.changes if not isinstance(change, Same)]

    def paths(self) -> list[str]:
        return [change.key for change in self.differences]

    def summary(self) -> dict[str, int]:
        counts = {status: 0 for status in CHANGE_STATUSES}
        for change in self.changes:
            counts[change.status] += 1
        return counts

    def to_dict(self) -> dict[str, Any]:
        return {
            "identical": self.identical,
            "summary": self.summary(),
            "changes": [change.to_dict() for change in self.differences],
        }
