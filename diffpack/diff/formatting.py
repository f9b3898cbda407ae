"""CLI-friendly rendering for instance diff results."""

from __future__ import annotations

from diffpack.diff.models import DIFF_CLASS_TYPES, DiffResult


def render_diff_summary(result: DiffResult) -> str:
    if result.is_type_mismatch:
        return "differences=1 type_mismatch=true"
    names = ",".join(sorted(result.field_names)) or "-"
    return f"differences={len(result)} fields={names}"


def render_field_diffs(result: DiffResult, *, max_changes: int = 8) -> str:
    if result.identical:
        return "no differences detected"

    mismatch = result.get(DIFF_CLASS_TYPES)
    if mismatch is not None:
        return f"type mismatch: {mismatch.first_value} != {mismatch.second_value}"

    limit = max(1, max_changes)
    diffs = result.sorted()
    lines = ["field differences:"]
    for diff in diffs[:limit]:
        origin = f" [{diff.declaring_type}]" if diff.declaring_type else ""
        lines.append(f"  {diff.field_name}{origin}: {diff.first_value!r} -> {diff.second_value!r}")
    if len(diffs) > limit:
        lines.append(f"  ... {len(diffs) - limit} additional difference(s) omitted")
    return "\n".join(lines)
