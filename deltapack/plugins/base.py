"""Versioned plugin interfaces and lifecycle event payloads."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Literal

PLUGIN_API_VERSION = "1.0"
PLUGIN_CONFIG_VERSION = 1
PLUGIN_CONFIG_ENV_VAR = "TOMLDELTA_PLUGIN_CONFIG"

LifecycleStatus = Literal["ok", "error"]
LifecycleHook = Literal["on_diff_start", "on_diff_end", "on_render_end"]
LIFECYCLE_HOOKS: tuple[LifecycleHook, ...] = ("on_diff_start", "on_diff_end", "on_render_end")


@dataclass(frozen=True, slots=True)
class DiffStartEvent:
    new_kind: str
    old_kind: str
    new_entry_count: int | None
    old_entry_count: int | None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class DiffEndEvent:
    status: LifecycleStatus
    identical: bool | None = None
    change_count: int | None = None
    summary: dict[str, int] | None = None
    error_type: str | None = None
    error_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class RenderEndEvent:
    status: LifecycleStatus
    line_count: int
    color: bool
    error_type: str | None = None
    error_message: str | None = None
    failed_key: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class LifecyclePlugin:
    """Base no-op lifecycle plugin interface (API v1.x)."""

    api_version = PLUGIN_API_VERSION
    name = "lifecycle-plugin"

    def on_diff_start(self, event: DiffStartEvent) -> None:
        return None

    def on_diff_end(self, event: DiffEndEvent) -> None:
        return None

    def on_render_end(self, event: RenderEndEvent) -> None:
        return None
