"""Plugin manager dispatching diff lifecycle hooks with fault isolation."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Callable
import warnings

from diffpack.plugins.base import (
    HOOK_NAMES,
    DiffEndEvent,
    DiffFieldEvent,
    DiffStartEvent,
    HookName,
)

_BoundHook = tuple[str, Callable[[Any], Any]]


@dataclass(frozen=True, slots=True)
class PluginDiagnostic:
    """A hook failure recorded instead of failing the diff."""

    plugin_name: str
    hook: HookName
    error_type: str
    message: str
    field_name: str | None = None

    def describe(self) -> str:
        location = f"hook={self.hook}"
        if self.field_name is not None:
            location += f" field={self.field_name}"
        return (
            f"DiffKit plugin failure: plugin={self.plugin_name} {location} "
            f"error={self.error_type}: {self.message}"
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class PluginManager:
    """Runs diff hooks on every plugin; a failing plugin never fails the diff.

    Callbacks are bound once, so a plugin without ``on_diff_field`` adds no
    work per reported field.
    """

    plugins: tuple[object, ...] = ()
    diagnostics: list[PluginDiagnostic] = field(default_factory=list)
    _bound: dict[HookName, tuple[_BoundHook, ...]] = field(
        init=False,
        repr=False,
        default_factory=dict,
    )

    def __post_init__(self) -> None:
        self.plugins = tuple(self.plugins)
        self._bound = {hook: _bind(self.plugins, hook) for hook in HOOK_NAMES}

    def observes(self, hook: HookName) -> bool:
        return bool(self._bound[hook])

    def on_diff_start(self, event: DiffStartEvent) -> None:
        self._dispatch("on_diff_start", event)

    def on_diff_field(self, event: DiffFieldEvent) -> None:
        self._dispatch("on_diff_field", event, field_name=event.field_name)

    def on_diff_end(self, event: DiffEndEvent) -> None:
        self._dispatch("on_diff_end", event)

    def _dispatch(self, hook: HookName, event: object, *, field_name: str | None = None) -> None:
        for plugin_name, callback in self._bound[hook]:
            try:
                callback(event)
            except Exception as error:
                diagnostic = PluginDiagnostic(
                    plugin_name=plugin_name,
                    hook=hook,
                    error_type=error.__class__.__name__,
                    message=str(error),
                    field_name=field_name,
                )
                self.diagnostics.append(diagnostic)
                warnings.warn(diagnostic.describe(), RuntimeWarning, stacklevel=3)


def _bind(plugins: tuple[object, ...], hook: HookName) -> tuple[_BoundHook, ...]:
    bound: list[_BoundHook] = []
    for plugin in plugins:
        callback = getattr(plugin, hook, None)
        if callable(callback):
            bound.append((_display_name(plugin), callback))
    return tuple(bound)


def _display_name(plugin: object) -> str:
    return str(getattr(plugin, "name", plugin.__class__.__name__))
