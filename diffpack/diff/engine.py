"""Field-by-field instance diff engine with hierarchy climbing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Iterable, TypeVar

from diffpack.core.accessor import declares_fields, fields_of, instance_fields, read_field
from diffpack.core.equality import EqualityRegistry, values_differ, values_equal
from diffpack.core.exceptions import EqualityError
from diffpack.core.hierarchy import (
    UNLIMITED_DEPTH,
    qualified_type_name,
    validate_depth_limit,
    walk_hierarchy,
)
from diffpack.core.policy import (
    ALL_FIELDS,
    AllFields,
    ExcludeFields,
    FieldSelectionPolicy,
    OnlyFields,
)
from diffpack.diff.models import (
    DiffOutcome,
    DiffReport,
    DiffResult,
    FieldDiff,
    type_mismatch_result,
)
from diffpack.plugins import (
    DiffEndEvent,
    DiffFieldEvent,
    DiffStartEvent,
    PluginManager,
    resolve_plugin_manager,
)

T = TypeVar("T")


def diff_instances(
    first: Any,
    second: Any,
    *,
    policy: FieldSelectionPolicy = ALL_FIELDS,
    climb_level: int = UNLIMITED_DEPTH,
    equality: EqualityRegistry | None = None,
) -> DiffResult:
    """Report the fields whose values differ between two instances.

    Same instance, an absent instance, or instances equal under ``==`` give
    an empty result. Instances of different types give the single
    ``DIFF_CLASS_TYPES`` diff. Otherwise every field declared from the
    dynamic type up ``climb_level`` ancestors is compared.

    Raises:
        FieldAccessError: A field could not be read. No partial result is
            returned.
        EqualityError: Two values could not be compared.
    """
    return compare_instances(
        first,
        second,
        policy=policy,
        climb_level=climb_level,
        equality=equality,
    ).result


def compare_instances(
    first: Any,
    second: Any,
    *,
    policy: FieldSelectionPolicy = ALL_FIELDS,
    climb_level: int = UNLIMITED_DEPTH,
    equality: EqualityRegistry | None = None,
) -> DiffReport:
    """Like :func:`diff_instances`, keeping the outcome that produced the result."""
    if not isinstance(policy, (AllFields, ExcludeFields, OnlyFields)):
        raise TypeError(f"Unsupported field selection policy: {policy!r}")
    climb_level = validate_depth_limit(climb_level)

    plugin_manager = resolve_plugin_manager()
    first_type = qualified_type_name(type(first))
    second_type = qualified_type_name(type(second))
    plugin_manager.on_diff_start(
        DiffStartEvent(
            first_type=first_type,
            second_type=second_type,
            policy=policy.to_dict(),
            climb_level=climb_level,
        )
    )

    try:
        outcome, result = _diff(
            first,
            second,
            policy=policy,
            climb_level=climb_level,
            equality=equality,
            plugin_manager=plugin_manager,
        )
    except Exception as error:
        plugin_manager.on_diff_end(
            DiffEndEvent(
                first_type=first_type,
                second_type=second_type,
                status="error",
                error_type=error.__class__.__name__,
                error_message=str(error),
            )
        )
        raise

    plugin_manager.on_diff_end(
        DiffEndEvent(
            first_type=first_type,
            second_type=second_type,
            status="ok",
            outcome=outcome,
            diff_count=len(result),
            field_names=tuple(sorted(result.field_names)),
        )
    )
    return DiffReport(outcome=outcome, result=result)


def _diff(
    first: Any,
    second: Any,
    *,
    policy: FieldSelectionPolicy,
    climb_level: int,
    equality: EqualityRegistry | None,
    plugin_manager: PluginManager,
) -> tuple[DiffOutcome, DiffResult]:
    if first is second:
        return "same_instance", DiffResult()
    if first is None or second is None:
        return "equal", DiffResult()

    same_type = type(first) is type(second)
    try:
        # A coarse __eq__ hides field differences here.
        if values_equal(first, second, equality=equality):
            return "equal", DiffResult()
    except EqualityError:
        # An __eq__ that cannot take the other type still leaves a type mismatch.
        if same_type:
            raise

    if not same_type:
        return "type_mismatch", type_mismatch_result(first, second)

    walk = walk_hierarchy(type(first), climb_level)
    undeclared = instance_fields(first, second, walk=walk)
    if not undeclared and not declares_fields(walk):
        return "no_fields", DiffResult()

    reported: dict[str, FieldDiff] = {}
    notify_fields = plugin_manager.observes("on_diff_field")

    for hierarchy_level in walk:
        candidates = (
            *fields_of(hierarchy_level.owner, level=hierarchy_level.level),
            *undeclared.get(hierarchy_level.level, ()),
        )
        for descriptor in candidates:
            if descriptor.name in reported or not policy.includes(descriptor.name):
                continue

            first_value = read_field(first, descriptor)
            second_value = read_field(second, descriptor)
            if not values_differ(first_value, second_value, equality=equality):
                continue

            reported[descriptor.name] = FieldDiff(
                field_name=descriptor.name,
                first_value=first_value,
                second_value=second_value,
                level=descriptor.level,
                declaring_type=descriptor.declaring_type,
            )
            if notify_fields:
                plugin_manager.on_diff_field(
                    DiffFieldEvent(
                        field_name=descriptor.name,
                        level=descriptor.level,
                        declaring_type=descriptor.declaring_type,
                    )
                )

    return "compared", DiffResult(reported.values())


@dataclass(frozen=True, slots=True)
class InstanceDiff(Generic[T]):
    """Diff session over one pair of instances.

    ``climb_level < 0`` compares fields of every ancestor, ``0`` only the
    dynamic type's own fields, ``n`` the dynamic type plus ``n`` ancestors.
    """

    first: T
    second: T
    climb_level: int = UNLIMITED_DEPTH
    equality: EqualityRegistry | None = field(default=None, kw_only=True)

    def __post_init__(self) -> None:
        validate_depth_limit(self.climb_level)

    def diff_all(self) -> DiffResult:
        return self.diff(ALL_FIELDS)

    def diff_excluding(self, names: Iterable[str]) -> DiffResult:
        return self.diff(ExcludeFields(names))

    def diff_only(self, names: Iterable[str]) -> DiffResult:
        return self.diff(OnlyFields(names))

    def diff(self, policy: FieldSelectionPolicy) -> DiffResult:
        return diff_instances(
            self.first,
            self.second,
            policy=policy,
            climb_level=self.climb_level,
            equality=self.equality,
        )
