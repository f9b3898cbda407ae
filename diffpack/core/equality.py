"""Value equality used to decide whether two field values differ."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping

from diffpack.core.exceptions import EqualityError

Comparator = Callable[[Any, Any], Any]


@dataclass(frozen=True, slots=True)
class EqualityRegistry:
    """Explicit per-type equality for values that are not plainly comparable.

    Lookup follows the value's MRO, so a comparator registered for a base
    class also covers its subclasses.
    """

    comparators: Mapping[type, Comparator] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "comparators", MappingProxyType(dict(self.comparators)))

    def with_comparator(self, value_type: type, comparator: Comparator) -> EqualityRegistry:
        if not isinstance(value_type, type):
            raise TypeError(f"value_type must be a type, got {value_type!r}")
        if not callable(comparator):
            raise TypeError(f"comparator for {value_type.__qualname__} must be callable")
        return EqualityRegistry({**self.comparators, value_type: comparator})

    def comparator_for(self, value: Any) -> Comparator | None:
        for owner in type(value).__mro__:
            comparator = self.comparators.get(owner)
            if comparator is not None:
                return comparator
        return None


def values_equal(first: Any, second: Any, *, equality: EqualityRegistry | None = None) -> bool:
    comparator = equality.comparator_for(first) if equality is not None else None
    try:
        if comparator is not None:
            return bool(comparator(first, second))
        return bool(first == second)
    except EqualityError:
        raise
    except Exception as error:
        raise EqualityError(
            "Could not compare values of type "
            f"{type(first).__qualname__} and {type(second).__qualname__}: {error}. "
            "Register a comparator for this type in an EqualityRegistry."
        ) from error


def values_differ(first: Any, second: Any, *, equality: EqualityRegistry | None = None) -> bool:
    """Return True when two field values are different.

    Identity short-circuits before any user equality runs, and exactly one
    ``None`` always differs.
    """
    if first is second:
        return False
    if first is None or second is None:
        return True
    return not values_equal(first, second, equality=equality)
