"""Document subsystem exceptions."""


class DocumentError(Exception):
    """Base class for document loading errors."""


class DocumentParseError(DocumentError):
    """Document text is not valid TOML."""


class DocumentEncodingError(DocumentError):
    """Document file is not valid UTF-8 text."""
