"""Stable public API surface for DiffKit.

This module is the supported import path for library users.
"""

from __future__ import annotations

from typing import Any, Iterable

from diffpack.core import (
    AccessError,
    DiffError,
    EqualityError,
    EqualityRegistry,
    FieldAccessError,
    register_field_table,
    unregister_field_table,
)
from diffpack.core.hierarchy import UNLIMITED_DEPTH
from diffpack.core.policy import ALL_FIELDS, ExcludeFields, OnlyFields
from diffpack.diff import (
    DIFF_CLASS_TYPES,
    AssertionResult,
    DiffResult,
    FieldDiff,
    InstanceDiff,
    InstanceMismatchError,
    assert_instances as _assert_instances,
    diff_instances,
)

__version__ = "0.1.0"


def diff(
    first: Any,
    second: Any,
    *,
    climb_level: int = UNLIMITED_DEPTH,
    equality: EqualityRegistry | None = None,
) -> DiffResult:
    """Diff every field of two instances.

    Args:
        first: First instance.
        second: Second instance, expected to share the first's type.
        climb_level: Ancestor levels to include. ``-1`` includes all of them,
            ``0`` only the dynamic type's own fields.
        equality: Comparators for field value types without a usable ``==``.

    Returns:
        Set of field diffs, unique by field name.
    """
    return diff_instances(
        first,
        second,
        policy=ALL_FIELDS,
        climb_level=climb_level,
        equality=equality,
    )


def diff_only(
    first: Any,
    second: Any,
    names: Iterable[str],
    *,
    climb_level: int = UNLIMITED_DEPTH,
    equality: EqualityRegistry | None = None,
) -> DiffResult:
    """Diff only the named fields of two instances.

    Args:
        first: First instance.
        second: Second instance.
        names: Field names to compare. Names that do not exist are ignored.
        climb_level: Ancestor levels to include.
        equality: Comparators for field value types without a usable ``==``.

    Returns:
        Set of field diffs restricted to ``names``.
    """
    return diff_instances(
        first,
        second,
        policy=OnlyFields(names),
        climb_level=climb_level,
        equality=equality,
    )


def diff_excluding(
    first: Any,
    second: Any,
    names: Iterable[str],
    *,
    climb_level: int = UNLIMITED_DEPTH,
    equality: EqualityRegistry | None = None,
) -> DiffResult:
    """Diff every field of two instances except the named ones.

    Args:
        first: First instance.
        second: Second instance.
        names: Field names to ignore.
        climb_level: Ancestor levels to include.
        equality: Comparators for field value types without a usable ``==``.

    Returns:
        Set of field diffs without any entry for ``names``.
    """
    return diff_instances(
        first,
        second,
        policy=ExcludeFields(names),
        climb_level=climb_level,
        equality=equality,
    )


def assert_instances(
    expected: Any,
    actual: Any,
    *,
    only: Iterable[str] | None = None,
    exclude: Iterable[str] | None = None,
    climb_level: int = UNLIMITED_DEPTH,
    equality: EqualityRegistry | None = None,
    raise_on_failure: bool = True,
) -> AssertionResult:
    """Assert two instances match field by field.

    Args:
        expected: Expected instance.
        actual: Actual instance.
        only: Compare only these field names.
        exclude: Ignore these field names. Mutually exclusive with ``only``.
        climb_level: Ancestor levels to include.
        equality: Comparators for field value types without a usable ``==``.
        raise_on_failure: Raise ``InstanceMismatchError`` when the assertion
            fails. Unequal values that expose no fields (strings, numbers,
            lists) fail even though their diff is empty.

    Returns:
        Assertion result with pass/fail status and the diff.

    Raises:
        InstanceMismatchError: If the assertion fails and ``raise_on_failure``
            is set.
        ValueError: If both ``only`` and ``exclude`` are provided.
    """
    result = _assert_instances(
        expected,
        actual,
        only=only,
        exclude=exclude,
        climb_level=climb_level,
        equality=equality,
    )
    if raise_on_failure:
        result.raise_for_failure()
    return result


__all__ = [
    "__version__",
    "DIFF_CLASS_TYPES",
    "FieldDiff",
    "DiffResult",
    "InstanceDiff",
    "AssertionResult",
    "EqualityRegistry",
    "DiffError",
    "FieldAccessError",
    "AccessError",
    "EqualityError",
    "InstanceMismatchError",
    "register_field_table",
    "unregister_field_table",
    "diff",
    "diff_only",
    "diff_excluding",
    "assert_instances",
]
