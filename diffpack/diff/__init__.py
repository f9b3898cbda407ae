"""Instance diff subsystem."""

from diffpack.diff.assertion import AssertionResult, InstanceMismatchError, assert_instances
from diffpack.diff.engine import InstanceDiff, compare_instances, diff_instances
from diffpack.diff.formatting import render_diff_summary, render_field_diffs
from diffpack.diff.models import DIFF_CLASS_TYPES, DiffOutcome, DiffReport, DiffResult, FieldDiff

__all__ = [
    "DIFF_CLASS_TYPES",
    "DiffOutcome",
    "FieldDiff",
    "DiffResult",
    "DiffReport",
    "InstanceDiff",
    "diff_instances",
    "compare_instances",
    "AssertionResult",
    "InstanceMismatchError",
    "assert_instances",
    "render_diff_summary",
    "render_field_diffs",
]
