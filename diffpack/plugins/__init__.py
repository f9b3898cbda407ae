"""Diff lifecycle plugins: hook events, config loading and activation."""

from diffpack.plugins.base import (
    HOOK_NAMES,
    PLUGIN_API_VERSION,
    PLUGIN_CONFIG_ENV_VAR,
    PLUGIN_CONFIG_VERSION,
    DiffEndEvent,
    DiffFieldEvent,
    DiffStartEvent,
    HookName,
    LifecyclePlugin,
)
from diffpack.plugins.exceptions import PluginConfigError, PluginError, PluginLoadError
from diffpack.plugins.loader import PluginEntry, load_plugin_manager_from_file, read_plugin_config
from diffpack.plugins.manager import PluginDiagnostic, PluginManager
from diffpack.plugins.reference import DiffTracePlugin
from diffpack.plugins.runtime import (
    env_plugin_manager,
    forget_env_plugin_config,
    resolve_plugin_manager,
    use_plugin_manager,
)

__all__ = [
    "DiffStartEvent",
    "DiffFieldEvent",
    "DiffEndEvent",
    "HOOK_NAMES",
    "HookName",
    "LifecyclePlugin",
    "DiffTracePlugin",
    "PluginManager",
    "PluginDiagnostic",
    "PluginEntry",
    "read_plugin_config",
    "load_plugin_manager_from_file",
    "resolve_plugin_manager",
    "env_plugin_manager",
    "use_plugin_manager",
    "forget_env_plugin_config",
    "PluginError",
    "PluginConfigError",
    "PluginLoadError",
    "PLUGIN_API_VERSION",
    "PLUGIN_CONFIG_VERSION",
    "PLUGIN_CONFIG_ENV_VAR",
]
