"""Lifecycle hook plugins for TomlDelta diff and render runs."""

from deltapack.plugins.base import (
    LIFECYCLE_HOOKS,
    PLUGIN_API_VERSION,
    PLUGIN_CONFIG_ENV_VAR,
    PLUGIN_CONFIG_VERSION,
    DiffEndEvent,
    DiffStartEvent,
    LifecyclePlugin,
    RenderEndEvent,
)
from deltapack.plugins.exceptions import PluginConfigError, PluginError, PluginLoadError
from deltapack.plugins.loader import load_plugin_manager_from_file
from deltapack.plugins.manager import PluginDiagnostic, PluginManager
from deltapack.plugins.reference import LifecycleTracePlugin
from deltapack.plugins.runtime import (
    get_active_plugin_manager,
    plugin_config_path_from_env,
    use_plugin_manager,
    use_plugins_from_config,
    use_plugins_from_env,
)

__all__ = [
    "LIFECYCLE_HOOKS",
    "PLUGIN_API_VERSION",
    "PLUGIN_CONFIG_VERSION",
    "PLUGIN_CONFIG_ENV_VAR",
    "PluginError",
    "PluginConfigError",
    "PluginLoadError",
    "DiffStartEvent",
    "DiffEndEvent",
    "RenderEndEvent",
    "LifecyclePlugin",
    "PluginDiagnostic",
    "PluginManager",
    "LifecycleTracePlugin",
    "load_plugin_manager_from_file",
    "get_active_plugin_manager",
    "plugin_config_path_from_env",
    "use_plugin_manager",
    "use_plugins_from_config",
    "use_plugins_from_env",
]
