"""Field selection policies deciding which field names participate in a diff."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Literal

PolicyKind = Literal["all", "exclude", "only"]


def _freeze_names(names: Iterable[str]) -> frozenset[str]:
    if isinstance(names, (str, bytes)):
        raise TypeError(
            "Field names must be a collection of strings, not a single string. "
            f"Wrap it in a set: {{{names!r}}}."
        )
    frozen = frozenset(names)
    invalid = sorted(repr(name) for name in frozen if not isinstance(name, str))
    if invalid:
        raise TypeError(f"Field names must be strings: {', '.join(invalid)}")
    return frozen


@dataclass(frozen=True, slots=True)
class AllFields:
    """Every field participates."""

    kind: PolicyKind = field(default="all", init=False)

    def includes(self, field_name: str) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "names": []}


@dataclass(frozen=True, slots=True)
class ExcludeFields:
    """Every field except the named ones participates."""

    names: frozenset[str]
    kind: PolicyKind = field(default="exclude", init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "names", _freeze_names(self.names))

    def includes(self, field_name: str) -> bool:
        return field_name not in self.names

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "names": sorted(self.names)}


@dataclass(frozen=True, slots=True)
class OnlyFields:
    """Only the named fields participate."""

    names: frozenset[str]
    kind: PolicyKind = field(default="only", init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "names", _freeze_names(self.names))

    def includes(self, field_name: str) -> bool:
        return field_name in self.names

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "names": sorted(self.names)}


FieldSelectionPolicy = AllFields | ExcludeFields | OnlyFields

ALL_FIELDS = AllFields()


def build_policy(
    *,
    only: Iterable[str] | None = None,
    exclude: Iterable[str] | None = None,
) -> FieldSelectionPolicy:
    """Resolve optional include/exclude name collections into one policy."""
    if only is not None and exclude is not None:
        raise ValueError("Use either only or exclude field names, not both.")
    if only is not None:
        return OnlyFields(only)
    if exclude is not None:
        return ExcludeFields(exclude)
    return ALL_FIELDS
