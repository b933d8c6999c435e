"""Iterative structural diff engine for document value trees."""

from __future__ import annotations

from typing import cast

from deltapack.core.paths import join_index, join_key
from deltapack.core.values import Array, Table, Value, is_container
from deltapack.diff.exceptions import InvalidTopLevelError
from deltapack.diff.models import Added, Change, ChangeSet, Changed, Deleted, Same
from deltapack.plugins import DiffEndEvent, DiffStartEvent, get_active_plugin_manager

_Frame = tuple[str, Value, Value]


def diff_documents(new_doc: Value, old_doc: Value) -> ChangeSet:
    """Diff ``new_doc`` against ``old_doc``.

    Entries found only in ``new_doc`` are reported as ``Added`` and entries
    found only in ``old_doc`` as ``Deleted``; argument order is significant.
    Both roots must be tables.

    Nested tables and arrays are compared with an explicit work stack, so
    document depth does not consume interpreter stack frames.
    """
    plugin_manager = get_active_plugin_manager()
    plugin_manager.on_diff_start(
        DiffStartEvent(
            new_kind=new_doc.kind,
            old_kind=old_doc.kind,
            new_entry_count=len(new_doc) if isinstance(new_doc, Table) else None,
            old_entry_count=len(old_doc) if isinstance(old_doc, Table) else None,
        )
    )

    try:
        if not isinstance(new_doc, Table):
            raise InvalidTopLevelError("new", new_doc.kind)
        if not isinstance(old_doc, Table):
            raise InvalidTopLevelError("old", old_doc.kind)

        changes: list[Change] = []
        stack: list[_Frame] = [("", new_doc, old_doc)]
        while stack:
            path, new_value, old_value = stack.pop()
            if isinstance(new_value, Array) and isinstance(old_value, Array):
                pending = _diff_arrays(path, new_value, old_value, changes)
            else:
                # Frames only ever pair containers of the same kind.
                pending = _diff_tables(path, cast(Table, new_value), cast(Table, old_value), changes)
            # Reversed so the lowest key/index is compared first.
            stack.extend(reversed(pending))

        result = ChangeSet(changes=changes)
    except Exception as error:
        plugin_manager.on_diff_end(
            DiffEndEvent(
                status="error",
                error_type=error.__class__.__name__,
                error_message=str(error),
            )
        )
        raise

    plugin_manager.on_diff_end(
        DiffEndEvent(
            status="ok",
            identical=result.identical,
            change_count=len(result.differences),
            summary=result.summary(),
        )
    )
    return result


def _diff_arrays(
    path: str,
    new_array: Array,
    old_array: Array,
    out: list[Change],
) -> list[_Frame]:
    pending: list[_Frame] = []
    for index, (new_item, old_item) in enumerate(zip(new_array.items, old_array.items)):
        if new_item == old_item:
            continue
        item_path = join_index(path, index)
        if _same_container_kind(new_item, old_item):
            pending.append((item_path, new_item, old_item))
        else:
            out.append(Changed(item_path, old=old_item, new=new_item))

    shared = min(len(new_array), len(old_array))
    for index in range(shared, len(new_array)):
        out.append(Added(join_index(path, index), new_array.items[index]))
    for index in range(shared, len(old_array)):
        out.append(Deleted(join_index(path, index), old_array.items[index]))
    return pending


def _diff_tables(
    path: str,
    new_table: Table,
    old_table: Table,
    out: list[Change],
) -> list[_Frame]:
    pending: list[_Frame] = []
    new_entries = new_table.sorted_entries()
    old_entries = old_table.sorted_entries()
    new_pos = 0
    old_pos = 0

    while new_pos < len(new_entries) and old_pos < len(old_entries):
        new_key, new_value = new_entries[new_pos]
        old_key, old_value = old_entries[old_pos]

        # Both sides are sorted, so the lower key is missing from the other table.
        if new_key < old_key:
            out.append(Added(join_key(path, new_key), new_value))
            new_pos += 1
            continue
        if old_key < new_key:
            out.append(Deleted(join_key(path, old_key), old_value))
            old_pos += 1
            continue

        new_pos += 1
        old_pos += 1
        key_path = join_key(path, new_key)
        if new_value == old_value:
            out.append(Same())
        elif _same_container_kind(new_value, old_value):
            pending.append((key_path, new_value, old_value))
        else:
            out.append(Changed(key_path, old=old_value, new=new_value))

    for key, value in new_entries[new_pos:]:
        out.append(Added(join_key(path, key), value))
    for key, value in old_entries[old_pos:]:
        out.append(Deleted(join_key(path, key), value))
    return pending


def _same_container_kind(new_value: Value, old_value: Value) -> bool:
    return new_value.kind == old_value.kind and is_container(new_value)
