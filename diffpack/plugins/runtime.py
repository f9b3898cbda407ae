"""Which plugins observe a diff: a context-scoped manager, else the env config.

The ``DIFFKIT_PLUGIN_CONFIG`` file is loaded lazily and reloaded when its
modification time changes. Library calls never fail because of it: a
broken config is reported as a ``RuntimeWarning`` on the diff that hit it
and the diff runs without plugins. The CLI loads it strictly instead.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Iterator
import warnings

from diffpack.plugins.base import PLUGIN_CONFIG_ENV_VAR
from diffpack.plugins.exceptions import PluginError
from diffpack.plugins.loader import load_plugin_manager_from_file
from diffpack.plugins.manager import PluginManager

_SCOPED_MANAGER: ContextVar[PluginManager | None] = ContextVar(
    "diffpack_scoped_plugin_manager",
    default=None,
)
_NO_PLUGINS = PluginManager()


@dataclass(slots=True)
class _EnvConfig:
    path: str | None = None
    mtime_ns: int | None = None
    manager: PluginManager = field(default_factory=lambda: _NO_PLUGINS)

    def matches(self, path: str, mtime_ns: int) -> bool:
        return self.path == path and self.mtime_ns == mtime_ns


_ENV_CONFIG = _EnvConfig()


def resolve_plugin_manager() -> PluginManager:
    """Plugin manager for the diff about to run; never raises."""
    scoped = _SCOPED_MANAGER.get()
    if scoped is not None:
        return scoped
    try:
        return env_plugin_manager()
    except PluginError as error:
        warnings.warn(
            f"DiffKit plugin config ignored for this diff: {error}",
            RuntimeWarning,
            stacklevel=3,
        )
        return _NO_PLUGINS


def env_plugin_manager() -> PluginManager:
    """Load the manager named by ``DIFFKIT_PLUGIN_CONFIG``.

    Raises:
        PluginConfigError: The file is missing or malformed.
        PluginLoadError: A plugin entrypoint could not be built.
    """
    raw_path = os.environ.get(PLUGIN_CONFIG_ENV_VAR, "").strip()
    if not raw_path:
        return _NO_PLUGINS

    try:
        mtime_ns = Path(raw_path).stat().st_mtime_ns
    except OSError:
        # The loader reports the unreadable path.
        return load_plugin_manager_from_file(raw_path)
    if _ENV_CONFIG.matches(raw_path, mtime_ns):
        return _ENV_CONFIG.manager

    manager = load_plugin_manager_from_file(raw_path)
    _ENV_CONFIG.path, _ENV_CONFIG.mtime_ns, _ENV_CONFIG.manager = raw_path, mtime_ns, manager
    return manager


@contextmanager
def use_plugin_manager(manager: PluginManager) -> Iterator[PluginManager]:
    """Route diffs in the current context to ``manager``, ignoring the env config."""
    token = _SCOPED_MANAGER.set(manager)
    try:
        yield manager
    finally:
        _SCOPED_MANAGER.reset(token)


def forget_env_plugin_config() -> None:
    _ENV_CONFIG.path, _ENV_CONFIG.mtime_ns, _ENV_CONFIG.manager = None, None, _NO_PLUGINS
