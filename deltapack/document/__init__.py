"""Document loading for TomlDelta."""

from deltapack.document.exceptions import (
    DocumentEncodingError,
    DocumentError,
    DocumentParseError,
)
from deltapack.document.io import load_document, read_document

__all__ = [
    "DocumentError",
    "DocumentParseError",
    "DocumentEncodingError",
    "load_document",
    "read_document",
]
