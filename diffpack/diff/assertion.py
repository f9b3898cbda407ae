"""Assertion helpers for test suites comparing instances field by field."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from diffpack.core.equality import EqualityRegistry
from diffpack.core.hierarchy import UNLIMITED_DEPTH
from diffpack.core.policy import FieldSelectionPolicy, build_policy
from diffpack.diff.engine import compare_instances
from diffpack.diff.formatting import render_diff_summary, render_field_diffs
from diffpack.diff.models import DiffOutcome, DiffResult


class InstanceMismatchError(AssertionError):
    """Raised when two instances differ in at least one compared field."""

    def __init__(self, message: str, *, result: DiffResult) -> None:
        super().__init__(message)
        self.result = result


@dataclass(slots=True)
class AssertionResult:
    """Outcome of comparing a candidate instance against an expected one.

    Values whose type exposes no fields (strings, numbers, lists) and that
    are unequal under ``==`` fail even though their diff is empty.
    """

    diff: DiffResult
    policy: FieldSelectionPolicy
    climb_level: int = UNLIMITED_DEPTH
    outcome: DiffOutcome = "compared"

    @property
    def passed(self) -> bool:
        return self.diff.identical and self.outcome != "no_fields"

    @property
    def exit_code(self) -> int:
        return 0 if self.passed else 1

    def render(self, *, max_changes: int = 8) -> str:
        status = "instances match" if self.passed else "instances differ"
        if self.outcome == "no_fields":
            details = "values differ under == and expose no fields to compare"
        else:
            details = render_field_diffs(self.diff, max_changes=max_changes)
        return "\n".join([f"{status}: {render_diff_summary(self.diff)}", details])

    def raise_for_failure(self, *, max_changes: int = 8) -> None:
        if not self.passed:
            raise InstanceMismatchError(self.render(max_changes=max_changes), result=self.diff)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": "pass" if self.passed else "fail",
            "exit_code": self.exit_code,
            "outcome": self.outcome,
            "policy": self.policy.to_dict(),
            "climb_level": self.climb_level,
            **self.diff.to_dict(),
        }


def assert_instances(
    expected: Any,
    actual: Any,
    *,
    only: Iterable[str] | None = None,
    exclude: Iterable[str] | None = None,
    climb_level: int = UNLIMITED_DEPTH,
    equality: EqualityRegistry | None = None,
) -> AssertionResult:
    """Compare two instances and return a pass/fail outcome."""
    policy = build_policy(only=only, exclude=exclude)
    report = compare_instances(
        expected,
        actual,
        policy=policy,
        climb_level=climb_level,
        equality=equality,
    )
    return AssertionResult(
        diff=report.result,
        policy=policy,
        climb_level=climb_level,
        outcome=report.outcome,
    )
