"""Lifecycle event dispatch with per-plugin fault isolation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable
import warnings

from deltapack.plugins.base import (
    LIFECYCLE_HOOKS,
    DiffEndEvent,
    DiffStartEvent,
    LifecycleHook,
    RenderEndEvent,
)

_BoundHook = tuple[str, Callable[[Any], None]]


@dataclass(frozen=True, slots=True)
class PluginDiagnostic:
    plugin_name: str
    hook: str
    error_type: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {
            "plugin_name": self.plugin_name,
            "hook": self.hook,
            "error_type": self.error_type,
            "message": self.message,
        }


@dataclass(slots=True)
class PluginManager:
    """Sends diff and render events to plugins.

    Callbacks are bound once, when the manager is built; a plugin only
    receives the hooks it defines. A hook that raises is recorded as a
    ``PluginDiagnostic`` and reported as a ``RuntimeWarning``, and the
    remaining plugins still run.
    """

    plugins: tuple[object, ...] = ()
    diagnostics: list[PluginDiagnostic] = field(default_factory=list)
    _bound: dict[str, list[_BoundHook]] = field(init=False, repr=False, default_factory=dict)

    def __post_init__(self) -> None:
        for hook in LIFECYCLE_HOOKS:
            bound: list[_BoundHook] = []
            for plugin in self.plugins:
                callback = getattr(plugin, hook, None)
                if callable(callback):
                    bound.append((_plugin_name(plugin), callback))
            self._bound[hook] = bound

    @property
    def plugin_names(self) -> list[str]:
        return [_plugin_name(plugin) for plugin in self.plugins]

    def subscribers(self, hook: LifecycleHook) -> list[str]:
        return [name for name, _ in self._bound[hook]]

    def clear_diagnostics(self) -> None:
        self.diagnostics.clear()

    def on_diff_start(self, event: DiffStartEvent) -> None:
        self._dispatch("on_diff_start", event)

    def on_diff_end(self, event: DiffEndEvent) -> None:
        self._dispatch("on_diff_end", event)

    def on_render_end(self, event: RenderEndEvent) -> None:
        self._dispatch("on_render_end", event)

    def _dispatch(self, hook: LifecycleHook, event: object) -> None:
        for plugin_name, callback in self._bound[hook]:
            try:
                callback(event)
            except Exception as error:
                self._record_failure(plugin_name, hook, error)

    def _record_failure(self, plugin_name: str, hook: str, error: Exception) -> None:
        diagnostic = PluginDiagnostic(
            plugin_name=plugin_name,
            hook=hook,
            error_type=error.__class__.__name__,
            message=str(error),
        )
        self.diagnostics.append(diagnostic)
        warnings.warn(
            f"TomlDelta plugin {plugin_name!r} failed in {hook}: "
            f"{diagnostic.error_type}: {diagnostic.message}",
            RuntimeWarning,
            stacklevel=4,
        )


def _plugin_name(plugin: object) -> str:
    name = getattr(plugin, "name", plugin.__class__.__name__)
    return str(name)
