"""Resolution of ``module:attribute`` references."""

from __future__ import annotations

import importlib


class EntrypointError(Exception):
    """A ``module:attribute`` reference is malformed or cannot be resolved."""


def import_entrypoint(reference: str) -> object:
    """Import ``module`` and return its (possibly dotted) ``attribute``."""
    module_name, separator, attribute = reference.partition(":")
    module_name = module_name.strip()
    attribute = attribute.strip()
    if not separator or not module_name or not attribute:
        raise EntrypointError(f"Expected 'module:attribute', got {reference!r}.")

    try:
        target: object = importlib.import_module(module_name)
    except Exception as error:
        raise EntrypointError(f"Failed to import module '{module_name}': {error}") from error

    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as error:
            raise EntrypointError(
                f"Could not find attribute '{attribute}' in '{module_name}'."
            ) from error
    return target
