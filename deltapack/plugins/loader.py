"""Versioned plugin configuration loader.

Plugin configs are JSON objects, or TOML documents when the file name ends
in ``.toml``::

    config_version = 1

    [[plugins]]
    entrypoint = "deltapack.plugins.reference:LifecycleTracePlugin"
    options = { output_path = "trace.ndjson" }
"""

from __future__ import annotations

import importlib
import json
from pathlib import Path
import tomllib
from typing import Any

from deltapack.plugins.base import PLUGIN_API_VERSION, PLUGIN_CONFIG_VERSION
from deltapack.plugins.exceptions import PluginConfigError, PluginLoadError
from deltapack.plugins.manager import PluginManager

_SUPPORTED_ENTRY_KEYS = frozenset({"entrypoint", "options", "enabled"})


def load_plugin_manager_from_file(path: str | Path) -> PluginManager:
    """Load a plugin manager from a JSON or TOML config file."""
    config_path = Path(path)
    raw = _read_config(config_path)

    if not isinstance(raw, dict):
        raise PluginConfigError(f"Plugin config must be an object ({config_path}).")

    version = raw.get("config_version")
    if version != PLUGIN_CONFIG_VERSION:
        raise PluginConfigError(
            "Unsupported plugin config version "
            f"{version!r}; expected {PLUGIN_CONFIG_VERSION}."
        )

    plugins_payload = raw.get("plugins", [])
    if not isinstance(plugins_payload, list):
        raise PluginConfigError("Plugin config key 'plugins' must be an array.")

    plugins: list[object] = []
    for index, payload in enumerate(plugins_payload, start=1):
        plugin = _load_plugin_payload(payload, index=index)
        if plugin is not None:
            plugins.append(plugin)

    return PluginManager(plugins=tuple(plugins))


def _read_config(config_path: Path) -> Any:
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as error:
        raise PluginConfigError(f"Cannot read plugin config ({config_path}): {error}") from error
    if config_path.suffix.lower() == ".toml":
        try:
            return tomllib.loads(text)
        except tomllib.TOMLDecodeError as error:
            raise PluginConfigError(
                f"Invalid plugin config TOML ({config_path}): {error}"
            ) from error
    try:
        return json.loads(text)
    except json.JSONDecodeError as error:
        raise PluginConfigError(f"Invalid plugin config JSON ({config_path}): {error}") from error


def _load_plugin_payload(payload: Any, *, index: int) -> object | None:
    if not isinstance(payload, dict):
        raise PluginConfigError(f"Plugin entry #{index} must be an object.")

    unknown = sorted(set(payload.keys()) - _SUPPORTED_ENTRY_KEYS)
    if unknown:
        raise PluginConfigError(
            f"Plugin entry #{index} contains unsupported keys: {', '.join(unknown)}"
        )

    enabled = payload.get("enabled", True)
    if not isinstance(enabled, bool):
        raise PluginConfigError(f"Plugin entry #{index} key 'enabled' must be boolean.")
    if not enabled:
        return None

    entrypoint = payload.get("entrypoint")
    if not isinstance(entrypoint, str) or ":" not in entrypoint:
        raise PluginConfigError(
            f"Plugin entry #{index} key 'entrypoint' must be 'module:attribute'."
        )

    options = payload.get("options", {})
    if not isinstance(options, dict):
        raise PluginConfigError(f"Plugin entry #{index} key 'options' must be an object.")

    target = _import_entrypoint(entrypoint, index=index)
    plugin = _instantiate_plugin(target, entrypoint=entrypoint, options=options, index=index)
    _validate_api_version(plugin, entrypoint=entrypoint, index=index)
    return plugin


def _import_entrypoint(entrypoint: str, *, index: int) -> object:
    module_name, _, attribute = entrypoint.partition(":")
    try:
        module = importlib.import_module(module_name)
    except Exception as error:
        raise PluginLoadError(
            f"Plugin entry #{index} failed to import module '{module_name}': {error}"
        ) from error

    try:
        return getattr(module, attribute)
    except AttributeError as error:
        raise PluginLoadError(
            f"Plugin entry #{index} could not find attribute '{attribute}' in '{module_name}'."
        ) from error


def _instantiate_plugin(
    target: object,
    *,
    entrypoint: str,
    options: dict[str, Any],
    index: int,
) -> object:
    if not callable(target):
        if options:
            raise PluginLoadError(
                f"Plugin entry #{index} uses non-callable '{entrypoint}' and cannot accept options."
            )
        return target

    try:
        return target(**options)
    except Exception as error:
        raise PluginLoadError(
            f"Plugin entry #{index} failed to instantiate '{entrypoint}' "
            f"with options {sorted(options.keys())}: {error}"
        ) from error


def _validate_api_version(plugin: object, *, entrypoint: str, index: int) -> None:
    version = str(getattr(plugin, "api_version", PLUGIN_API_VERSION))
    expected_major = PLUGIN_API_VERSION.split(".", 1)[0]
    if version.split(".", 1)[0] != expected_major:
        raise PluginLoadError(
            f"Plugin entry #{index} '{entrypoint}' declares unsupported api_version "
            f"{version!r}; supported major version is {expected_major}."
        )
