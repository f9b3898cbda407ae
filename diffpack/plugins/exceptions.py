"""Exceptions raised while configuring or loading diff lifecycle plugins."""


class PluginError(Exception):
    """Base class for diff plugin errors."""


class PluginConfigError(PluginError):
    """Plugin config file is not a valid versioned plugin list."""


class PluginLoadError(PluginError):
    """A plugin entrypoint could not be imported, built or version-checked."""
