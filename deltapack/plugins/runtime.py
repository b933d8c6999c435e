"""Scoped plugin activation.

The diff engine and renderer read only the context-local manager, which
defaults to one with no plugins. Resolving a config from the environment
is left to the process boundary (the CLI), which activates it for the
duration of one command.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
import os
from pathlib import Path
from typing import Iterator, Mapping

from deltapack.plugins.base import PLUGIN_CONFIG_ENV_VAR
from deltapack.plugins.loader import load_plugin_manager_from_file
from deltapack.plugins.manager import PluginManager

_NO_PLUGINS = PluginManager(plugins=())
_ACTIVE_PLUGIN_MANAGER: ContextVar[PluginManager] = ContextVar(
    "deltapack_active_plugin_manager",
    default=_NO_PLUGINS,
)


def get_active_plugin_manager() -> PluginManager:
    return _ACTIVE_PLUGIN_MANAGER.get()


def plugin_config_path_from_env(environ: Mapping[str, str] | None = None) -> Path | None:
    """Return the config path named by ``TOMLDELTA_PLUGIN_CONFIG``, if any."""
    values = os.environ if environ is None else environ
    raw = values.get(PLUGIN_CONFIG_ENV_VAR, "").strip()
    return Path(raw) if raw else None


@contextmanager
def use_plugin_manager(manager: PluginManager) -> Iterator[PluginManager]:
    token = _ACTIVE_PLUGIN_MANAGER.set(manager)
    try:
        yield manager
    finally:
        _ACTIVE_PLUGIN_MANAGER.reset(token)


@contextmanager
def use_plugins_from_config(path: str | Path) -> Iterator[PluginManager]:
    """Load plugins from a config file and activate them for this context."""
    manager = load_plugin_manager_from_file(path)
    with use_plugin_manager(manager):
        yield manager


@contextmanager
def use_plugins_from_env(
    environ: Mapping[str, str] | None = None,
) -> Iterator[PluginManager]:
    """Activate the env-configured plugins; keep the current manager when unset.

    Raises:
        PluginConfigError, PluginLoadError: the config is malformed or an
            entrypoint cannot be imported.
        OSError: the config file cannot be read.
    """
    config_path = plugin_config_path_from_env(environ)
    if config_path is None:
        yield get_active_plugin_manager()
        return
    with use_plugins_from_config(config_path) as manager:
        yield manager
