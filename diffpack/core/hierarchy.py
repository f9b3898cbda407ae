"""Type hierarchy walker bounded by a climb depth."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

UNLIMITED_DEPTH = -1


@dataclass(frozen=True, slots=True)
class HierarchyLevel:
    """One type in a hierarchy walk; level 0 is the dynamic type."""

    level: int
    owner: type

    @property
    def qualified_name(self) -> str:
        return qualified_type_name(self.owner)


@dataclass(frozen=True, slots=True)
class HierarchyWalk:
    """Lazy, restartable walk from a dynamic type up to (excluding) ``object``.

    Ancestors are visited in method resolution order, so mixins appear at the
    level Python would consult them during attribute lookup.
    """

    start_type: type
    depth_limit: int = UNLIMITED_DEPTH

    def __iter__(self) -> Iterator[HierarchyLevel]:
        for level, owner in enumerate(self.start_type.__mro__):
            if owner is object:
                return
            if not self.includes_level(level):
                return
            yield HierarchyLevel(level=level, owner=owner)

    def includes_level(self, level: int) -> bool:
        return self.depth_limit < 0 or level <= self.depth_limit

    def full_chain(self) -> tuple[type, ...]:
        """All ancestors below ``object`` regardless of the depth limit."""
        return tuple(owner for owner in self.start_type.__mro__ if owner is not object)


def walk_hierarchy(start_type: type, depth_limit: int = UNLIMITED_DEPTH) -> HierarchyWalk:
    """Build a hierarchy walk for ``start_type``.

    ``depth_limit < 0`` walks every ancestor, ``0`` keeps only the dynamic
    type, and ``n`` adds up to ``n`` ancestor levels.
    """
    if not isinstance(start_type, type):
        raise TypeError(f"start_type must be a type, got {start_type!r}")
    return HierarchyWalk(start_type=start_type, depth_limit=validate_depth_limit(depth_limit))


def validate_depth_limit(depth_limit: int) -> int:
    if isinstance(depth_limit, bool) or not isinstance(depth_limit, int):
        raise TypeError(f"depth limit must be an int, got {depth_limit!r}")
    return depth_limit


def qualified_type_name(owner: type) -> str:
    return f"{owner.__module__}.{owner.__qualname__}"
