"""Data models for instance field diff results."""

from __future__ import annotations

from collections.abc import Set
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Literal

from diffpack.core.hierarchy import qualified_type_name

DiffOutcome = Literal["same_instance", "equal", "type_mismatch", "no_fields", "compared"]

DIFF_CLASS_TYPES = "__class__"
"""Field name of the single diff reported when two instances differ in type.

Its values are the fully-qualified names of both dynamic types.
"""


@dataclass(frozen=True, slots=True, eq=False)
class FieldDiff:
    """A field whose value differs between the two instances.

    Equality, hashing and ordering use ``field_name`` only, so shadowed
    fields reported from different levels collapse into one entry.
    """

    field_name: str
    first_value: Any
    second_value: Any
    level: int | None = None
    declaring_type: str | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldDiff):
            return NotImplemented
        return self.field_name == other.field_name

    def __hash__(self) -> int:
        return hash(self.field_name)

    def __lt__(self, other: FieldDiff) -> bool:
        if not isinstance(other, FieldDiff):
            return NotImplemented
        return self.field_name < other.field_name

    def to_dict(self) -> dict[str, Any]:
        return {
            "field_name": self.field_name,
            "first_value": self.first_value,
            "second_value": self.second_value,
            "level": self.level,
            "declaring_type": self.declaring_type,
        }


class DiffResult(Set):
    """Immutable set of field diffs, unique by field name.

    The first diff added for a name wins. Iteration order is insertion
    order but is not part of the contract; use :meth:`sorted` for a stable
    listing.
    """

    __slots__ = ("_diffs",)

    def __init__(self, diffs: Iterable[FieldDiff] = ()) -> None:
        collected: dict[str, FieldDiff] = {}
        for diff in diffs:
            collected.setdefault(diff.field_name, diff)
        self._diffs = collected

    @classmethod
    def _from_iterable(cls, iterable: Iterable[FieldDiff]) -> DiffResult:
        return cls(iterable)

    def __iter__(self) -> Iterator[FieldDiff]:
        return iter(self._diffs.values())

    def __len__(self) -> int:
        return len(self._diffs)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, FieldDiff):
            return item.field_name in self._diffs
        if isinstance(item, str):
            return item in self._diffs
        return False

    __hash__ = Set._hash

    def __repr__(self) -> str:
        return f"DiffResult({self.sorted()!r})"

    @property
    def identical(self) -> bool:
        return not self._diffs

    @property
    def is_type_mismatch(self) -> bool:
        return DIFF_CLASS_TYPES in self._diffs

    @property
    def field_names(self) -> frozenset[str]:
        return frozenset(self._diffs)

    def get(self, field_name: str) -> FieldDiff | None:
        return self._diffs.get(field_name)

    def sorted(self) -> list[FieldDiff]:
        return sorted(self._diffs.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "identical": self.identical,
            "type_mismatch": self.is_type_mismatch,
            "diff_count": len(self),
            "field_names": sorted(self._diffs),
            "diffs": [diff.to_dict() for diff in self.sorted()],
        }


def type_mismatch_result(first: Any, second: Any) -> DiffResult:
    return DiffResult(
        [
            FieldDiff(
                field_name=DIFF_CLASS_TYPES,
                first_value=qualified_type_name(type(first)),
                second_value=qualified_type_name(type(second)),
            )
        ]
    )


@dataclass(frozen=True, slots=True)
class DiffReport:
    """A diff result together with how the engine reached it.

    ``no_fields`` means the instances are unequal under ``==`` but their type
    exposes no fields at any level, so the empty result proves nothing.
    """

    outcome: DiffOutcome
    result: DiffResult

    @property
    def conclusive(self) -> bool:
        return self.outcome != "no_fields"

    def to_dict(self) -> dict[str, Any]:
        return {"outcome": self.outcome, **self.result.to_dict()}
