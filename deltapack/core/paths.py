"""Dotted/bracketed path labels for locations inside a document."""

from __future__ import annotations

import json
import re

_BARE_KEY_RE = re.compile(r"^[A-Za-z0-9_-]+$")
_TRAILING_INDEX_RE = re.compile(r"\[(\d+)\]$")


def format_key(key: str) -> str:
    """Return ``key`` as it would be written in a TOML dotted key."""
    if _BARE_KEY_RE.match(key):
        return key
    return json.dumps(key, ensure_ascii=False)


def join_key(parent: str, key: str) -> str:
    segment = format_key(key)
    if not parent:
        return segment
    return f"{parent}.{segment}"


def join_index(parent: str, index: int) -> str:
    return f"{parent}[{index}]"


def trailing_index(path: str) -> int | None:
    match = _TRAILING_INDEX_RE.search(path)
    if match is None:
        return None
    return int(match.group(1))


def is_within(path: str, prefix: str) -> bool:
    """True when ``path`` is ``prefix`` itself or a location below it."""
    if path == prefix:
        return True
    return path.startswith(f"{prefix}.") or path.startswith(f"{prefix}[")
