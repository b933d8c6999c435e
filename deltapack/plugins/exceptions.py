"""Plugin subsystem exceptions."""


class PluginError(Exception):
    """Base class for plugin subsystem errors."""


class PluginConfigError(PluginError):
    """Plugin config file is malformed or declares an unsupported version."""


class PluginLoadError(PluginError):
    """A configured plugin entrypoint could not be imported or instantiated."""
