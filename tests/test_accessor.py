from __future__ import annotations

from dataclasses import InitVar, dataclass, field
from typing import Any, ClassVar

import pytest

from diffpack.core.accessor import (
    MISSING,
    declares_fields,
    fields_of,
    instance_fields,
    read_field,
    register_field_table,
    unregister_field_table,
)
from diffpack.core.exceptions import AccessError, FieldAccessError
from diffpack.core.hierarchy import walk_hierarchy


class Parent:
    label: ClassVar[str] = "parent"
    a: int

    def __init__(self, a: int = 0) -> None:
        self.a = a


class Child(Parent):
    b: Any
    default_flag: bool = False

    def __init__(self, a: int = 0, b: Any = None) -> None:
        super().__init__(a)
        self.b = b


class Secretive:
    __token: str

    def __init__(self, token: str) -> None:
        self.__token = token


class Slotted:
    __slots__ = ("x", "__y")

    def __init__(self, x: int, y: int | None = None) -> None:
        self.x = x
        if y is not None:
            self.__y = y


@dataclass(slots=True)
class SlottedRecord:
    name: str
    size: int = 0
    scale: InitVar[int] = 1
    registry: ClassVar[dict[str, Any]] = {}

    def __post_init__(self, scale: int) -> None:
        self.size *= scale


class Tabled:
    __diff_fields__ = ("kept",)

    kept: int
    ignored: int

    def __init__(self, kept: int, ignored: int) -> None:
        self.kept = kept
        self.ignored = ignored


class Guarded:
    value: int

    def __init__(self, value: int) -> None:
        self.value = value

    def __getattribute__(self, name: str) -> Any:
        raise RuntimeError(f"attribute access blocked: {name}")


class Unrelated:
    a: int = 0


class Base:
    def __init__(self) -> None:
        self.__hidden = 1
        self.extra = 2


class Derived(Base):
    pass


@dataclass
class Computed:
    raw: list[int] = field(default_factory=list)


class Plain:
    x: int = 0


class Computing(Plain):
    getter_calls = 0

    @property
    def x(self) -> int:
        Computing.getter_calls += 1
        raise RuntimeError("getter must not run")


@pytest.fixture
def computed_table() -> Any:
    register_field_table(
        Computed,
        {
            "total": lambda instance: sum(instance.raw),
            "broken": lambda instance: instance.missing_attribute,
        },
    )
    yield Computed
    unregister_field_table(Computed)


def _names(descriptors) -> list[str]:
    return [descriptor.name for descriptor in descriptors]


def test_fields_of_lists_only_own_declared_fields() -> None:
    child_fields = fields_of(Child, level=1)

    assert _names(child_fields) == ["b", "default_flag"]
    assert {descriptor.level for descriptor in child_fields} == {1}
    assert {descriptor.owner for descriptor in child_fields} == {Child}
    assert {descriptor.kind for descriptor in child_fields} == {"declared"}
    assert _names(fields_of(Parent, level=2)) == ["a"]


def test_private_names_are_reported_as_written() -> None:
    (descriptor,) = fields_of(Secretive, level=0)

    assert descriptor.name == "__token"
    assert descriptor.attribute == "_Secretive__token"
    assert read_field(Secretive("abc"), descriptor) == "abc"


def test_slots_are_read_through_their_descriptors() -> None:
    descriptors = fields_of(Slotted, level=0)
    instance = Slotted(1, 2)

    assert _names(descriptors) == ["x", "__y"]
    assert {descriptor.kind for descriptor in descriptors} == {"slot"}
    assert [read_field(instance, descriptor) for descriptor in descriptors] == [1, 2]


def test_unset_slot_reads_missing() -> None:
    descriptors = {descriptor.name: descriptor for descriptor in fields_of(Slotted, level=0)}

    assert read_field(Slotted(1), descriptors["__y"]) is MISSING
    assert repr(MISSING) == "<MISSING>"


def test_slotted_dataclass_skips_classvar_and_initvar() -> None:
    descriptors = fields_of(SlottedRecord, level=0)
    record = SlottedRecord("disk", 2, scale=3)

    assert _names(descriptors) == ["name", "size"]
    assert [read_field(record, descriptor) for descriptor in descriptors] == ["disk", 6]


def test_class_level_default_is_read_when_instance_has_no_value() -> None:
    descriptors = {descriptor.name: descriptor for descriptor in fields_of(Child, level=0)}

    assert read_field(Child(), descriptors["default_flag"]) is False


def test_explicit_field_table_overrides_annotations() -> None:
    descriptors = fields_of(Tabled, level=0)

    assert _names(descriptors) == ["kept"]
    assert descriptors[0].kind == "table"
    assert read_field(Tabled(1, 2), descriptors[0]) == 1


def test_registered_readers_and_reader_failures(computed_table: type) -> None:
    descriptors = {descriptor.name: descriptor for descriptor in fields_of(computed_table, level=0)}
    instance = computed_table([1, 2, 3])

    assert read_field(instance, descriptors["total"]) == 6
    with pytest.raises(FieldAccessError, match="broken"):
        read_field(instance, descriptors["broken"])


def test_registered_table_is_removed_on_unregister() -> None:
    register_field_table(Unrelated, ["a"])
    unregister_field_table(Unrelated)

    assert _names(fields_of(Unrelated, level=0)) == ["a"]
    assert fields_of(Unrelated, level=0)[0].kind == "declared"


def test_register_field_table_validates_input() -> None:
    with pytest.raises(TypeError, match="not a string"):
        register_field_table(Unrelated, "a")
    with pytest.raises(TypeError, match="must be callable"):
        register_field_table(Unrelated, {"a": 1})
    with pytest.raises(TypeError, match="owner must be a type"):
        register_field_table(Unrelated(), ["a"])


def test_read_bypasses_attribute_hooks() -> None:
    (descriptor,) = fields_of(Guarded, level=0)

    assert read_field(Guarded(7), descriptor) == 7


def test_read_rejects_descriptor_from_foreign_hierarchy() -> None:
    (descriptor,) = fields_of(Unrelated, level=0)

    with pytest.raises(AccessError, match="not in the hierarchy"):
        read_field(Parent(1), descriptor)


def test_instance_fields_groups_undeclared_attributes_by_level() -> None:
    grouped = instance_fields(Derived(), Derived(), walk=walk_hierarchy(Derived))

    assert _names(grouped[0]) == ["extra"]
    assert grouped[0][0].owner is Derived
    assert _names(grouped[1]) == ["__hidden"]
    assert grouped[1][0].owner is Base
    assert {descriptor.kind for descriptors in grouped.values() for descriptor in descriptors} == {
        "instance"
    }


def test_instance_fields_includes_attributes_of_either_instance() -> None:
    first = Derived()
    second = Derived()
    second.late = "only here"

    grouped = instance_fields(first, second, walk=walk_hierarchy(Derived))
    late = next(descriptor for descriptor in grouped[0] if descriptor.name == "late")

    assert read_field(first, late) is MISSING
    assert read_field(second, late) == "only here"


def test_instance_fields_skip_declared_and_tabled_types() -> None:
    assert instance_fields(Child(1, 2), Child(1, 2), walk=walk_hierarchy(Child)) == {}
    assert instance_fields(Tabled(1, 2), Tabled(1, 3), walk=walk_hierarchy(Tabled)) == {}


def test_property_shadowing_a_field_reads_missing_without_calling_getter() -> None:
    (descriptor,) = fields_of(Plain, level=1)

    assert read_field(Computing(), descriptor) is MISSING
    assert Computing.getter_calls == 0


def test_stored_value_wins_over_property_lookup() -> None:
    (descriptor,) = fields_of(Plain, level=1)
    instance = Computing()
    vars(instance)["x"] = 5

    assert read_field(instance, descriptor) == 5
    assert Computing.getter_calls == 0


def test_declares_fields_looks_past_the_climb_limit() -> None:
    assert declares_fields(walk_hierarchy(Computing, 0)) is True
    assert declares_fields(walk_hierarchy(Derived)) is False
    assert declares_fields(walk_hierarchy(str)) is False
