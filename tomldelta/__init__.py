"""Stable public API surface for TomlDelta.

This module is the supported import path for library users.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from deltapack import __version__
from deltapack.core.values import Table, Value
from deltapack.diff import (
    AssertionResult,
    ChangeSet,
    assert_documents,
    diff_documents,
    render_changes,
)
from deltapack.document import load_document, read_document

DocumentSource = str | Path | Value


def _resolve(source: DocumentSource) -> Value:
    if isinstance(source, (str, Path)):
        return read_document(source)
    return source


def load(path: str | Path) -> Table:
    """Read a TOML file into a value tree.

    Raises:
        FileNotFoundError: ``path`` does not exist.
        DocumentError: the file is not UTF-8 or not valid TOML.
    """
    return read_document(path)


def loads(text: str) -> Table:
    """Parse TOML text into a value tree."""
    return load_document(text)


def diff(new: DocumentSource, old: DocumentSource) -> ChangeSet:
    """Diff two documents and return the ordered change set.

    Args:
        new: Path to, or value tree of, the document compared *to*.
            Entries only found here are reported as added.
        old: Path to, or value tree of, the baseline document.
            Entries only found here are reported as deleted.

    Returns:
        Change set in discovery order.
    """
    return diff_documents(_resolve(new), _resolve(old))


def render(change_set: ChangeSet, *, color: bool = False) -> str:
    """Render a change set as ``+``/``-`` prefixed text.

    Raises:
        RenderError: a value could not be serialized; ``error.partial``
            holds the lines rendered before the failure.
    """
    return render_changes(change_set, color=color)


def check(
    new: DocumentSource,
    old: DocumentSource,
    *,
    ignore_paths: Iterable[str] = (),
) -> AssertionResult:
    """Assert that ``new`` matches ``old`` outside ``ignore_paths``.

    Returns:
        Assertion result with pass/fail, exit code and violations.
    """
    return assert_documents(_resolve(new), _resolve(old), ignore_paths=ignore_paths)


__all__ = [
    "__version__",
    "DocumentSource",
    "AssertionResult",
    "ChangeSet",
    "load",
    "loads",
    "diff",
    "render",
    "check",
]
