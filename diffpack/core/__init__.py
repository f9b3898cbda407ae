"""Core primitives for instance field diffing."""

from diffpack.core.accessor import (
    FIELD_TABLE_ATTRIBUTE,
    MISSING,
    FieldDescriptor,
    declares_fields,
    field_table_for,
    fields_of,
    instance_fields,
    read_field,
    register_field_table,
    unregister_field_table,
)
from diffpack.core.equality import EqualityRegistry, values_differ, values_equal
from diffpack.core.exceptions import AccessError, DiffError, EqualityError, FieldAccessError
from diffpack.core.hierarchy import (
    UNLIMITED_DEPTH,
    HierarchyLevel,
    HierarchyWalk,
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
    build_policy,
)

__all__ = [
    "DiffError",
    "FieldAccessError",
    "AccessError",
    "EqualityError",
    "UNLIMITED_DEPTH",
    "HierarchyLevel",
    "HierarchyWalk",
    "walk_hierarchy",
    "qualified_type_name",
    "validate_depth_limit",
    "ALL_FIELDS",
    "AllFields",
    "ExcludeFields",
    "OnlyFields",
    "FieldSelectionPolicy",
    "build_policy",
    "FIELD_TABLE_ATTRIBUTE",
    "MISSING",
    "FieldDescriptor",
    "fields_of",
    "declares_fields",
    "instance_fields",
    "read_field",
    "field_table_for",
    "register_field_table",
    "unregister_field_table",
    "EqualityRegistry",
    "values_differ",
    "values_equal",
]
