"""Versioned plugin interfaces and diff lifecycle event payloads."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Literal

PLUGIN_API_VERSION = "1.0"
PLUGIN_CONFIG_VERSION = 1
PLUGIN_CONFIG_ENV_VAR = "DIFFKIT_PLUGIN_CONFIG"

LifecycleStatus = Literal["ok", "error"]
HookName = Literal["on_diff_start", "on_diff_field", "on_diff_end"]
HOOK_NAMES: tuple[HookName, ...] = ("on_diff_start", "on_diff_field", "on_diff_end")


@dataclass(frozen=True, slots=True)
class DiffStartEvent:
    first_type: str
    second_type: str
    policy: dict[str, Any]
    climb_level: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class DiffFieldEvent:
    field_name: str
    level: int
    declaring_type: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class DiffEndEvent:
    first_type: str
    second_type: str
    status: LifecycleStatus
    outcome: str | None = None
    diff_count: int | None = None
    field_names: tuple[str, ...] | None = None
    error_type: str | None = None
    error_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class LifecyclePlugin:
    """Base no-op lifecycle plugin interface (API v1.x)."""

    api_version = PLUGIN_API_VERSION
    name = "lifecycle-plugin"

    def on_diff_start(self, event: DiffStartEvent) -> None:
        return None

    def on_diff_field(self, event: DiffFieldEvent) -> None:
        return None

    def on_diff_end(self, event: DiffEndEvent) -> None:
        return None
