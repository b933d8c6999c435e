"""Assertion helpers for CI-oriented drift checks between documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from deltapack.core.paths import is_within
from deltapack.core.values import Value
from deltapack.diff.engine import diff_documents
from deltapack.diff.models import Added, ChangeSet, Changed, Deleted


@dataclass(slots=True)
class AssertionResult:
    """Outcome of comparing a candidate document against a baseline."""

    change_set: ChangeSet
    ignore_paths: tuple[str, ...] = ()
    violations: list[Added | Deleted | Changed] = field(default_factory=list)
    ignored: list[Added | Deleted | Changed] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.violations

    @property
    def exit_code(self) -> int:
        return 0 if self.passed else 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": "pass" if self.passed else "fail",
            "exit_code": self.exit_code,
            "summary": self.change_set.summary(),
            "ignore_paths": list(self.ignore_paths),
            "violation_count": len(self.violations),
            "violations": [change.to_dict() for change in self.violations],
            "ignored_count": len(self.ignored),
            "ignored": [change.to_dict() for change in self.ignored],
        }


def assert_documents(
    new_doc: Value,
    old_doc: Value,
    *,
    ignore_paths: Iterable[str] = (),
) -> AssertionResult:
    """Diff ``new_doc`` against ``old_doc`` and fail on any non-ignored difference.

    A difference is ignored when its path equals one of ``ignore_paths`` or
    lies below it (``servers`` covers ``servers.alpha`` and ``servers[0]``).
    """
    prefixes = tuple(path.strip() for path in ignore_paths if path.strip())
    change_set = diff_documents(new_doc, old_doc)

    violations: list[Added | Deleted | Changed] = []
    ignored: list[Added | Deleted | Changed] = []
    for change in change_set.differences:
        if any(is_within(change.key, prefix) for prefix in prefixes):
            ignored.append(change)
        else:
            violations.append(change)

    return AssertionResult(
        change_set=change_set,
        ignore_paths=prefixes,
        violations=violations,
        ignored=ignored,
    )
