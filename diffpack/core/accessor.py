"""Per-level field discovery and visibility-bypassing field reads.

A level's fields come from, in order of precedence:

* an explicit field table, registered with :func:`register_field_table` or
  declared in the class body as ``__diff_fields__``;
* the class's own ``__slots__`` followed by its own annotations (dataclass
  fields included), skipping ``ClassVar`` and ``InitVar``.

Attributes found in an instance ``__dict__`` that no class declares are
reported by :func:`instance_fields`. Name-mangled ones belong to the class
whose name they carry; the rest belong to the dynamic type.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
import inspect
import sys
from types import MemberDescriptorType
import typing
from typing import Any, Callable, Iterable, Literal, Mapping

from diffpack.core.exceptions import FieldAccessError
from diffpack.core.hierarchy import HierarchyWalk, qualified_type_name

if sys.version_info >= (3, 14):
    from annotationlib import Format

    def _own_annotations(owner: type) -> dict[str, Any]:
        return inspect.get_annotations(owner, format=Format.FORWARDREF)

else:

    def _own_annotations(owner: type) -> dict[str, Any]:
        return inspect.get_annotations(owner)


FieldKind = Literal["slot", "declared", "table", "instance"]
FieldReader = Callable[[Any], Any]
FieldTable = tuple[tuple[str, FieldReader | None], ...]

FIELD_TABLE_ATTRIBUTE = "__diff_fields__"

_IMPLICIT_SLOTS = frozenset({"__dict__", "__weakref__"})
_CLASS_LEVEL_MARKERS = frozenset({"ClassVar", "InitVar"})
_FIELD_TABLES: dict[type, FieldTable] = {}


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<MISSING>"

    def __reduce__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """A field declared on one hierarchy level."""

    name: str
    level: int
    owner: type
    attribute: str
    kind: FieldKind
    reader: FieldReader | None = field(default=None, compare=False, repr=False)

    @property
    def declaring_type(self) -> str:
        return qualified_type_name(self.owner)


def register_field_table(owner: type, fields: Iterable[str] | Mapping[str, FieldReader]) -> None:
    """Declare the complete field list for ``owner``'s own level.

    ``fields`` is either field names or a mapping of field name to a reader
    callable taking the instance.
    """
    if not isinstance(owner, type):
        raise TypeError(f"owner must be a type, got {owner!r}")
    if isinstance(fields, Mapping):
        entries = tuple((name, reader) for name, reader in fields.items())
    else:
        entries = tuple((name, None) for name in _field_names(fields, owner=owner))

    for name, reader in entries:
        if not isinstance(name, str):
            raise TypeError(f"Field table names for {owner.__qualname__} must be strings: {name!r}")
        if reader is not None and not callable(reader):
            raise TypeError(f"Field reader for {owner.__qualname__}.{name} must be callable")
    _FIELD_TABLES[owner] = entries


def unregister_field_table(owner: type) -> None:
    _FIELD_TABLES.pop(owner, None)


def field_table_for(owner: type) -> FieldTable | None:
    registered = _FIELD_TABLES.get(owner)
    if registered is not None:
        return registered

    declared = owner.__dict__.get(FIELD_TABLE_ATTRIBUTE)
    if declared is None:
        return None
    return tuple((name, None) for name in _field_names(declared, owner=owner))


def fields_of(owner: type, *, level: int) -> tuple[FieldDescriptor, ...]:
    """Fields declared directly on ``owner`` (never inherited ones)."""
    table = field_table_for(owner)
    if table is not None:
        return tuple(
            FieldDescriptor(
                name=name,
                level=level,
                owner=owner,
                attribute=_mangle(owner, name),
                kind="table",
                reader=reader,
            )
            for name, reader in table
        )

    descriptors: list[FieldDescriptor] = []
    seen: set[str] = set()
    for attribute in _own_slots(owner):
        if attribute in seen:
            continue
        seen.add(attribute)
        descriptors.append(
            FieldDescriptor(
                name=_demangle(owner, attribute),
                level=level,
                owner=owner,
                attribute=attribute,
                kind="slot",
            )
        )

    for attribute, annotation in _own_annotations(owner).items():
        if attribute in seen or _is_class_level(annotation):
            continue
        seen.add(attribute)
        descriptors.append(
            FieldDescriptor(
                name=_demangle(owner, attribute),
                level=level,
                owner=owner,
                attribute=attribute,
                kind="declared",
            )
        )
    return tuple(descriptors)


def instance_fields(
    first: Any,
    second: Any,
    *,
    walk: HierarchyWalk,
) -> dict[int, tuple[FieldDescriptor, ...]]:
    """Group undeclared ``__dict__`` attributes of both instances by level."""
    if field_table_for(walk.start_type) is not None:
        return {}

    chain = walk.full_chain()
    declared = {
        descriptor.attribute
        for owner in chain
        for descriptor in fields_of(owner, level=0)
    }
    attributes = dict.fromkeys([*_instance_dict(first), *_instance_dict(second)])

    grouped: dict[int, list[FieldDescriptor]] = {}
    for attribute in attributes:
        if not isinstance(attribute, str) or attribute in declared:
            continue
        level, owner = _attribute_owner(attribute, chain)
        grouped.setdefault(level, []).append(
            FieldDescriptor(
                name=_demangle(owner, attribute),
                level=level,
                owner=owner,
                attribute=attribute,
                kind="instance",
            )
        )
    return {level: tuple(descriptors) for level, descriptors in grouped.items()}


def declares_fields(walk: HierarchyWalk) -> bool:
    """Whether any type in the full chain, climbed or not, declares a field."""
    return any(fields_of(owner, level=level) for level, owner in enumerate(walk.full_chain()))


def read_field(instance: Any, descriptor: FieldDescriptor) -> Any:
    """Read a field value, ignoring naming conventions and attribute hooks.

    Declared fields that were never assigned read as :data:`MISSING`, as do
    names shadowed by a property: getters are never run.
    """
    instance_type = type(instance)
    if descriptor.owner not in instance_type.__mro__:
        raise FieldAccessError(
            f"Field {descriptor.name!r} is declared on {descriptor.declaring_type}, "
            f"which is not in the hierarchy of {qualified_type_name(instance_type)}."
        )

    if descriptor.reader is not None:
        try:
            return descriptor.reader(instance)
        except Exception as error:
            raise FieldAccessError(
                f"Field reader for {descriptor.declaring_type}.{descriptor.name} failed: {error}"
            ) from error

    if descriptor.kind == "slot":
        return _read_slot(instance, descriptor)
    return _read_stored(instance, descriptor)


def _read_slot(instance: Any, descriptor: FieldDescriptor) -> Any:
    member = descriptor.owner.__dict__.get(descriptor.attribute)
    if not isinstance(member, MemberDescriptorType):
        raise FieldAccessError(
            f"Slot {descriptor.attribute!r} not found on {descriptor.declaring_type}."
        )
    try:
        return member.__get__(instance, descriptor.owner)
    except AttributeError:
        return MISSING


def _read_stored(instance: Any, descriptor: FieldDescriptor) -> Any:
    stored = _instance_dict(instance)
    if descriptor.attribute in stored:
        return stored[descriptor.attribute]

    for owner in type(instance).__mro__:
        candidate = owner.__dict__.get(descriptor.attribute, MISSING)
        if candidate is MISSING:
            continue
        if isinstance(candidate, property):
            # A property holds no stored value.
            return MISSING
        if not isinstance(candidate, MemberDescriptorType):
            return candidate
        try:
            return candidate.__get__(instance, owner)
        except AttributeError:
            return MISSING
    return MISSING


def _instance_dict(instance: Any) -> dict[str, Any]:
    try:
        stored = object.__getattribute__(instance, "__dict__")
    except AttributeError:
        return {}
    return stored if isinstance(stored, dict) else {}


def _own_slots(owner: type) -> Iterable[str]:
    slots = owner.__dict__.get("__slots__", ())
    if isinstance(slots, str):
        slots = (slots,)
    for name in slots:
        if name in _IMPLICIT_SLOTS:
            continue
        yield _mangle(owner, name)


def _is_class_level(annotation: Any) -> bool:
    if isinstance(annotation, str):
        head = annotation.split("[", 1)[0].strip()
        return head.rsplit(".", 1)[-1] in _CLASS_LEVEL_MARKERS
    if annotation is typing.ClassVar or typing.get_origin(annotation) is typing.ClassVar:
        return True
    return annotation is dataclasses.InitVar or isinstance(annotation, dataclasses.InitVar)


def _attribute_owner(attribute: str, chain: tuple[type, ...]) -> tuple[int, type]:
    for level, owner in enumerate(chain):
        if _demangle(owner, attribute) != attribute:
            return level, owner
    return 0, chain[0]


def _mangle(owner: type, name: str) -> str:
    prefix = owner.__name__.lstrip("_")
    if not prefix or not name.startswith("__") or name.endswith("__"):
        return name
    return f"_{prefix}{name}"


def _demangle(owner: type, attribute: str) -> str:
    prefix = owner.__name__.lstrip("_")
    marker = f"_{prefix}__"
    if not prefix or not attribute.startswith(marker) or attribute.endswith("__"):
        return attribute
    return attribute[len(marker) - 2 :]


def _field_names(names: Any, *, owner: type) -> tuple[str, ...]:
    if isinstance(names, (str, bytes)):
        raise TypeError(
            f"Field table for {owner.__qualname__} must be a collection of names, not a string."
        )
    return tuple(names)
