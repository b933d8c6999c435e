"""Line-oriented rendering for change sets."""

from __future__ import annotations

from typing import Callable, Iterator

import tomlkit
from tomlkit.exceptions import ConvertError
from tomlkit.items import Item
import typer

from deltapack.core.paths import format_key, join_key
from deltapack.core.values import Array, Table, Value, to_python
from deltapack.diff.exceptions import RenderError
from deltapack.diff.models import Added, ChangeSet, Changed, Deleted
from deltapack.plugins import RenderEndEvent, get_active_plugin_manager

Serializer = Callable[[Value], str]

ADDED_PREFIX = "+"
DELETED_PREFIX = "-"

_PREFIX_COLORS = {
    ADDED_PREFIX: typer.colors.GREEN,
    DELETED_PREFIX: typer.colors.RED,
}
_SERIALIZATION_ERRORS = (ConvertError, TypeError, ValueError)


def serialize_value(value: Value) -> str:
    """Serialize a single value to its TOML text form, e.g. ``[1, 2, 3]``."""
    return _to_item(value).as_string()


def _to_item(value: Value) -> Item:
    if isinstance(value, Array):
        array = tomlkit.array()
        for element in value.items:
            array.append(_to_item(element))
        return array
    if isinstance(value, Table):
        table = tomlkit.inline_table()
        for key, element in value.entries:
            table.append(key, _to_item(element))
        return table
    return tomlkit.item(to_python(value))


def render_value(
    prefix: str,
    key: str,
    value: Value,
    *,
    serializer: Serializer = serialize_value,
) -> Iterator[str]:
    """Yield the prefixed lines for one value, expanding tables into sections.

    Nested sections and entries are labelled with their own key, while a
    ``RenderError`` reports the full path of the value that failed.
    """
    stack: list[tuple[str, str, Value]] = [(key, key, value)]
    while stack:
        label, path, current = stack.pop()
        if isinstance(current, Table):
            yield f"{prefix} [{label}]"
            children = [
                (format_key(child_key), join_key(path, child_key), child)
                for child_key, child in current.sorted_entries()
            ]
            stack.extend(reversed(children))
            continue

        try:
            serialized = serializer(current)
        except _SERIALIZATION_ERRORS as error:
            raise RenderError(
                f"Cannot serialize {current.kind} value at '{path}': {error}",
                key=path,
                partial="",
            ) from error

        # Split on "\n" only: strings may carry U+2028 and similar unescaped.
        first, *rest = serialized.split("\n")
        yield f"{prefix} {label} = {first}"
        for line in rest:
            yield f"{prefix} {line}"


def render_lines(
    change_set: ChangeSet,
    *,
    color: bool = False,
    serializer: Serializer = serialize_value,
) -> Iterator[str]:
    """Yield report lines (each ending in a newline) for ``change_set``."""
    emitted: list[str] = []
    for change in change_set:
        if isinstance(change, Added):
            parts = [(ADDED_PREFIX, change.key, change.value)]
        elif isinstance(change, Deleted):
            parts = [(DELETED_PREFIX, change.key, change.value)]
        elif isinstance(change, Changed):
            parts = [
                (DELETED_PREFIX, change.key, change.old),
                (ADDED_PREFIX, change.key, change.new),
            ]
        else:
            continue

        for prefix, key, value in parts:
            try:
                for line in render_value(prefix, key, value, serializer=serializer):
                    rendered = _colorize(prefix, line) if color else line
                    emitted.append(rendered + "\n")
                    yield rendered + "\n"
            except RenderError as error:
                raise RenderError(str(error), key=error.key, partial="".join(emitted)) from (
                    error.__cause__
                )


def render_changes(
    change_set: ChangeSet,
    *,
    color: bool = False,
    serializer: Serializer = serialize_value,
) -> str:
    """Render a change set as ``+``/``-`` prefixed report text."""
    plugin_manager = get_active_plugin_manager()
    lines: list[str] = []
    try:
        for line in render_lines(change_set, color=color, serializer=serializer):
            lines.append(line)
    except RenderError as error:
        plugin_manager.on_render_end(
            RenderEndEvent(
                status="error",
                line_count=len(lines),
                color=color,
                error_type=error.__class__.__name__,
                error_message=str(error),
                failed_key=error.key,
            )
        )
        raise

    plugin_manager.on_render_end(
        RenderEndEvent(status="ok", line_count=len(lines), color=color)
    )
    return "".join(lines)


def render_summary(change_set: ChangeSet) -> str:
    summary = change_set.summary()
    return (
        f"added={summary['added']} deleted={summary['deleted']} "
        f"changed={summary['changed']} same={summary['same']}"
    )


def _colorize(prefix: str, line: str) -> str:
    return typer.style(line, fg=_PREFIX_COLORS[prefix])
