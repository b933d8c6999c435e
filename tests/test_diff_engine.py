from pathlib import Path
import sys

import pytest

from deltapack.core.values import Array, Float, Integer, String, Table, from_python
from deltapack.diff import (
    Added,
    Changed,
    Deleted,
    InvalidTopLevelError,
    Same,
    diff_documents,
)
from deltapack.document import load_document, read_document

FIXTURES = Path(__file__).resolve().parent / "fixtures" / "documents"


def _diff_fixtures(new_name: str, old_name: str):
    new_doc = read_document(FIXTURES / f"{new_name}.toml")
    old_doc = read_document(FIXTURES / f"{old_name}.toml")
    return diff_documents(new_doc, old_doc)


def test_diff_identical_documents_only_report_same() -> None:
    doc = read_document(FIXTURES / "service_new.toml")

    result = diff_documents(doc, doc)

    assert result.identical is True
    assert result.differences == []
    assert all(isinstance(change, Same) for change in result)
    assert result.summary()["same"] == 2


def test_diff_scalar_keys_are_classified_by_direction() -> None:
    result = _diff_fixtures("strings_a", "strings_b")

    assert [(change.status, change.key) for change in result.differences] == [
        ("added", "b"),
        ("deleted", "c"),
        ("added", "e"),
        ("added", "f"),
    ]
    assert result.differences[0].value == String("def")
    assert result.summary() == {"same": 2, "added": 3, "deleted": 1, "changed": 0}


def test_diff_is_directional() -> None:
    forward = _diff_fixtures("strings_a", "strings_b")
    backward = _diff_fixtures("strings_b", "strings_a")

    assert [change.status for change in backward.differences] == [
        "deleted",
        "added",
        "deleted",
        "deleted",
    ]
    assert backward.paths() == forward.paths()


def test_diff_keys_are_visited_in_sorted_order_regardless_of_declaration() -> None:
    new_doc = from_python({"f": 1, "b": 2, "e": 3, "a": 0})
    old_doc = from_python({"c": 4, "a": 0})

    result = diff_documents(new_doc, old_doc)

    assert result.paths() == ["b", "c", "e", "f"]


def test_diff_whole_arrays_added_and_deleted() -> None:
    result = _diff_fixtures("arrays_a", "arrays_b")

    assert [(change.status, change.key) for change in result.differences] == [
        ("added", "a"),
        ("deleted", "c"),
        ("deleted", "e"),
        ("deleted", "f"),
    ]
    assert result.differences[0].value == Array((Integer(1), Integer(2), Integer(3)))


def test_diff_tables_added_and_deleted_as_whole_values() -> None:
    result = _diff_fixtures("tables_a", "tables_b")

    added, deleted = result.differences
    assert isinstance(added, Added)
    assert added.key == "b"
    assert added.value == from_python({"c": "ghi", "d": "jkl"})
    assert isinstance(deleted, Deleted)
    assert deleted.key == "c"


def test_diff_nested_tables_are_compared_entry_by_entry() -> None:
    result = _diff_fixtures("nested_tables_a", "nested_tables_b")

    assert [(change.status, change.key) for change in result.differences] == [
        ("deleted", "outer.inner_b"),
        ("added", "outer.inner_c"),
    ]
    assert result.summary()["same"] == 1


def test_diff_kind_mismatch_is_reported_as_changed() -> None:
    new_doc = from_python({"port": "8080", "ratio": 1.0})
    old_doc = from_python({"port": 8080, "ratio": 1})

    result = diff_documents(new_doc, old_doc)

    port, ratio = result.differences
    assert isinstance(port, Changed)
    assert port.key == "port"
    assert port.old == Integer(8080)
    assert port.new == String("8080")
    assert ratio.old.kind == "integer"
    assert ratio.new.kind == "float"


def test_diff_scalar_value_change_carries_full_path() -> None:
    new_doc = from_python({"a": {"b": {"c": 2}}})
    old_doc = from_python({"a": {"b": {"c": 1}}})

    result = diff_documents(new_doc, old_doc)

    (change,) = result.differences
    assert change == Changed("a.b.c", old=Integer(1), new=Integer(2))
    assert change.position is None


def test_diff_table_replaced_by_scalar_is_changed_not_descended() -> None:
    new_doc = from_python({"server": "localhost"})
    old_doc = from_python({"server": {"host": "localhost"}})

    (change,) = diff_documents(new_doc, old_doc).differences

    assert isinstance(change, Changed)
    assert change.old.kind == "table"
    assert change.new.kind == "string"


def test_diff_arrays_are_positional_with_leftover_policy() -> None:
    longer_new = diff_documents(
        from_python({"ports": [80, 443, 8443, 9000]}),
        from_python({"ports": [80, 444]}),
    )
    longer_old = diff_documents(
        from_python({"ports": [80]}),
        from_python({"ports": [80, 443, 8443]}),
    )

    assert [(change.status, change.key) for change in longer_new.differences] == [
        ("changed", "ports[1]"),
        ("added", "ports[2]"),
        ("added", "ports[3]"),
    ]
    assert longer_new.differences[1].position == 2
    assert [(change.status, change.key) for change in longer_old.differences] == [
        ("deleted", "ports[1]"),
        ("deleted", "ports[2]"),
    ]


def test_diff_arrays_do_not_align_shifted_elements() -> None:
    result = diff_documents(
        from_python({"xs": [0, 1, 2]}),
        from_python({"xs": [1, 2]}),
    )

    assert [(change.status, change.key) for change in result.differences] == [
        ("changed", "xs[0]"),
        ("changed", "xs[1]"),
        ("added", "xs[2]"),
    ]


def test_diff_arrays_never_emit_same_for_equal_elements() -> None:
    result = diff_documents(
        from_python({"xs": [1, 2, 3]}),
        from_python({"xs": [1, 2, 4]}),
    )

    assert len(result) == 1
    assert result[0].key == "xs[2]"


def test_diff_descends_into_tables_inside_arrays() -> None:
    result = _diff_fixtures("service_new", "service_old")

    assert [(change.status, change.key) for change in result.differences] == [
        ("changed", "package.version"),
        ("changed", "server.port"),
        ("deleted", "server.backends[2]"),
        ("changed", "server.backends[0].weight"),
        ("added", "server.ports[2]"),
    ]


def test_diff_nested_arrays_use_bracketed_paths() -> None:
    result = diff_documents(
        from_python({"matrix": [[1, 2], [3, 4]]}),
        from_python({"matrix": [[1, 2], [3, 5]]}),
    )

    assert result.paths() == ["matrix[1][1]"]


def test_diff_quotes_keys_that_are_not_bare() -> None:
    result = diff_documents(
        from_python({"tool": {"a.b": 1, "with space": 2}}),
        from_python({"tool": {}}),
    )

    assert result.paths() == ['tool."a.b"', 'tool."with space"']


def test_diff_nan_values_compare_equal() -> None:
    doc = Table((("x", Float(float("nan"))),))

    assert diff_documents(doc, doc).identical is True


def test_diff_rejects_non_table_roots() -> None:
    table = from_python({"a": 1})

    with pytest.raises(InvalidTopLevelError, match="new document root must be a table") as info:
        diff_documents(Array((Integer(1),)), table)
    assert info.value.side == "new"
    assert info.value.kind == "array"

    with pytest.raises(InvalidTopLevelError, match="old document root must be a table, got string"):
        diff_documents(table, String("a"))


def test_diff_handles_nesting_deeper_than_recursion_limit() -> None:
    depth = sys.getrecursionlimit() + 500
    new_doc: Table = Table((("leaf", Integer(2)),))
    old_doc: Table = Table((("leaf", Integer(1)),))
    for _ in range(depth):
        new_doc = Table((("k", new_doc),))
        old_doc = Table((("k", old_doc),))

    result = diff_documents(new_doc, old_doc)

    (change,) = result.differences
    assert isinstance(change, Changed)
    assert change.key == ".".join(["k"] * depth + ["leaf"])
    assert change.new == Integer(2)


def test_diff_reports_offset_only_datetime_change() -> None:
    new_doc = load_document("t = 2024-01-01T01:00:00+01:00")
    old_doc = load_document("t = 2024-01-01T00:00:00Z")

    result = diff_documents(new_doc, old_doc)

    (change,) = result.differences
    assert isinstance(change, Changed)
    assert change.key == "t"
    assert change.old.value.isoformat() == "2024-01-01T00:00:00+00:00"
    assert change.new.value.isoformat() == "2024-01-01T01:00:00+01:00"


def test_diff_reports_local_versus_offset_datetime() -> None:
    new_doc = load_document("t = 2024-01-01T00:00:00")
    old_doc = load_document("t = 2024-01-01T00:00:00Z")

    result = diff_documents(new_doc, old_doc)

    assert [change.status for change in result.differences] == ["changed"]


def test_diff_identical_datetimes_are_same() -> None:
    text = "d = 2024-01-01\nt = 07:32:00\ndt = 1979-05-27T07:32:00-08:00\n"

    result = diff_documents(load_document(text), load_document(text))

    assert result.identical is True
    assert result.summary()["same"] == 3
