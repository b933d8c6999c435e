"""TomlDelta internals: value trees, diff engine, rendering, plugins and CLI."""

__version__ = "0.1.0"
