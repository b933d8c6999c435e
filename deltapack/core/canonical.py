"""Deterministic JSON-safe form of value trees."""

from __future__ import annotations

from datetime import date, datetime, time
import json
import math
from typing import Any

from deltapack.core.values import Array, Float, Table, Value


def canonicalize(value: Value) -> Any:
    """Normalize a value tree to a deterministic JSON-safe representation."""
    if isinstance(value, Table):
        return {key: canonicalize(item) for key, item in value.sorted_entries()}

    if isinstance(value, Array):
        return [canonicalize(item) for item in value.items]

    if isinstance(value, Float):
        return _normalize_float(value.value)

    raw = value.value
    if isinstance(raw, (datetime, date, time)):
        return raw.isoformat()
    return raw


def canonical_json(value: Value) -> str:
    """Serialize a value tree to stable canonical JSON."""
    return json.dumps(
        canonicalize(value),
        ensure_ascii=True,
        separators=(",", ":"),
        sort_keys=True,
    )


def _normalize_float(value: float) -> float | str:
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return value
