"""Command line interface for TomlDelta."""
