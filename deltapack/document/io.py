"""Read TOML documents into value trees."""

from __future__ import annotations

from pathlib import Path
import tomllib
from typing import cast

from deltapack.core.values import Table, from_python
from deltapack.document.exceptions import DocumentEncodingError, DocumentParseError


def load_document(text: str, *, source: str = "<string>") -> Table:
    """Parse TOML text into a root table."""
    try:
        raw = tomllib.loads(text)
    except tomllib.TOMLDecodeError as error:
        raise DocumentParseError(f"Document is not valid TOML: {source} ({error})") from error

    return cast(Table, from_python(raw))


def read_document(path: str | Path) -> Table:
    target = Path(path)
    try:
        raw_text = target.read_text(encoding="utf-8")
    except UnicodeDecodeError as error:
        raise DocumentEncodingError(f"Document is not valid UTF-8 text: {target}") from error

    return load_document(raw_text, source=str(target))
