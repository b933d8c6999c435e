"""Diff subsystem exceptions."""

from __future__ import annotations


class DiffError(Exception):
    """Base class for diff and render errors."""


class InvalidTopLevelError(DiffError):
    """A document root passed to the diff engine is not a table."""

    def __init__(self, side: str, kind: str) -> None:
        super().__init__(f"{side} document root must be a table, got {kind}")
        self.side = side
        self.kind = kind


class RenderError(DiffError):
    """A value could not be serialized while rendering a change set.

    ``partial`` holds the report text rendered before the failing line.
    """

    def __init__(self, message: str, *, key: str, partial: str) -> None:
        super().__init__(message)
        self.key = key
        self.partial = partial
