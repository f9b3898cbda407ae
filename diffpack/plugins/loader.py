"""Versioned plugin configuration loader.

A config file looks like::

    {"config_version": 1,
     "plugins": [{"entrypoint": "pkg.module:Plugin", "options": {}, "enabled": true}]}

Every entry is validated before any entrypoint is imported.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from pathlib import Path
from typing import Any

from diffpack.entrypoints import EntrypointError, import_entrypoint
from diffpack.plugins.base import HOOK_NAMES, PLUGIN_API_VERSION, PLUGIN_CONFIG_VERSION
from diffpack.plugins.exceptions import PluginConfigError, PluginLoadError
from diffpack.plugins.manager import PluginManager

_ENTRY_KEYS = frozenset({"entrypoint", "options", "enabled"})


@dataclass(frozen=True, slots=True)
class PluginEntry:
    """One validated ``plugins`` item; ``index`` is 1-based for messages."""

    index: int
    entrypoint: str
    options: dict[str, Any] = field(default_factory=dict)
    enabled: bool = True

    @classmethod
    def parse(cls, raw: Any, *, index: int) -> PluginEntry:
        if not isinstance(raw, dict):
            raise PluginConfigError(f"Plugin entry #{index} must be a JSON object.")

        unknown = sorted(set(raw) - _ENTRY_KEYS)
        if unknown:
            raise PluginConfigError(
                f"Plugin entry #{index} contains unsupported keys: {', '.join(unknown)}"
            )

        entrypoint = raw.get("entrypoint")
        if not isinstance(entrypoint, str) or ":" not in entrypoint:
            raise PluginConfigError(
                f"Plugin entry #{index} key 'entrypoint' must be 'module:attribute'."
            )
        options = raw.get("options", {})
        if not isinstance(options, dict):
            raise PluginConfigError(f"Plugin entry #{index} key 'options' must be a JSON object.")
        enabled = raw.get("enabled", True)
        if not isinstance(enabled, bool):
            raise PluginConfigError(f"Plugin entry #{index} key 'enabled' must be boolean.")

        return cls(index=index, entrypoint=entrypoint, options=options, enabled=enabled)

    def build(self) -> object:
        """Import, instantiate and check the plugin this entry names."""
        try:
            target = import_entrypoint(self.entrypoint)
        except EntrypointError as error:
            raise PluginLoadError(f"Plugin entry #{self.index}: {error}") from error

        plugin = self._instantiate(target)
        self._check_api_version(plugin)
        if not any(callable(getattr(plugin, hook, None)) for hook in HOOK_NAMES):
            raise PluginLoadError(
                f"Plugin entry #{self.index} '{self.entrypoint}' defines none of "
                f"{', '.join(HOOK_NAMES)}."
            )
        return plugin

    def _instantiate(self, target: object) -> object:
        if not callable(target):
            if self.options:
                raise PluginLoadError(
                    f"Plugin entry #{self.index} uses non-callable '{self.entrypoint}' "
                    "and cannot accept options."
                )
            return target
        try:
            return target(**self.options)
        except Exception as error:
            raise PluginLoadError(
                f"Plugin entry #{self.index} failed to instantiate '{self.entrypoint}' "
                f"with options {sorted(self.options)}: {error}"
            ) from error

    def _check_api_version(self, plugin: object) -> None:
        declared = str(getattr(plugin, "api_version", PLUGIN_API_VERSION))
        if _major(declared) != _major(PLUGIN_API_VERSION):
            raise PluginLoadError(
                f"Plugin entry #{self.index} '{self.entrypoint}' declares unsupported "
                f"api_version {declared!r}; supported major version is "
                f"{_major(PLUGIN_API_VERSION)}."
            )


def read_plugin_config(path: str | Path) -> tuple[PluginEntry, ...]:
    """Parse and validate a plugin config file without importing anything."""
    config_path = Path(path)
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as error:
        raise PluginConfigError(f"Cannot read plugin config ({config_path}): {error}") from error
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as error:
        raise PluginConfigError(f"Invalid plugin config JSON ({config_path}): {error}") from error

    if not isinstance(raw, dict):
        raise PluginConfigError(f"Plugin config must be a JSON object ({config_path}).")
    if raw.get("config_version") != PLUGIN_CONFIG_VERSION:
        raise PluginConfigError(
            f"Unsupported plugin config version {raw.get('config_version')!r}; "
            f"expected {PLUGIN_CONFIG_VERSION}."
        )
    entries = raw.get("plugins")
    if not isinstance(entries, list):
        raise PluginConfigError("Plugin config key 'plugins' must be a JSON array.")

    return tuple(PluginEntry.parse(entry, index=index) for index, entry in enumerate(entries, 1))


def load_plugin_manager_from_file(path: str | Path) -> PluginManager:
    """Build a plugin manager from the enabled entries of a config file."""
    entries = read_plugin_config(path)
    return PluginManager(plugins=tuple(entry.build() for entry in entries if entry.enabled))


def _major(version: str) -> str:
    return version.split(".", 1)[0]
