"""Diff subsystem for TomlDelta."""

from deltapack.diff.assertion import AssertionResult, assert_documents
from deltapack.diff.engine import diff_documents
from deltapack.diff.exceptions import DiffError, InvalidTopLevelError, RenderError
from deltapack.diff.formatting import (
    render_changes,
    render_lines,
    render_summary,
    render_value,
    serialize_value,
)
from deltapack.diff.models import (
    Added,
    Change,
    ChangeSet,
    ChangeStatus,
    Changed,
    Deleted,
    Same,
)

__all__ = [
    "ChangeStatus",
    "Change",
    "Same",
    "Added",
    "Deleted",
    "Changed",
    "ChangeSet",
    "DiffError",
    "InvalidTopLevelError",
    "RenderError",
    "diff_documents",
    "AssertionResult",
    "assert_documents",
    "render_changes",
    "render_lines",
    "render_summary",
    "render_value",
    "serialize_value",
]
