"""Utilities for comparing a raised dispatch error with a declared expectation."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List

from cellextest.errors import DispatchError

from .models import ExpectError


@dataclass(frozen=True)
class FieldMismatch:
    """One declared field that did not match the observed error."""

    field: str
    expected: Any
    actual: Any
    rule: str = "equals"

    def describe(self) -> str:
        verb = "to contain" if self.rule == "contains" else ""
        expected = f"{verb} {self.expected!r}".strip()
        return f"{self.field}: expected {expected}, actual {self.actual!r}"


@dataclass
class ComparisonResult:
    """Aggregated comparison outcome for a case."""

    passed: bool
    mismatches: List[FieldMismatch] = field(default_factory=list)

    @property
    def message(self) -> str:
        return "; ".join(item.describe() for item in self.mismatches)


def compare_error(expectation: ExpectError, error: DispatchError) -> ComparisonResult:
    mismatches: list[FieldMismatch] = []
    if expectation.status is not None and error.status != expectation.status:
        mismatches.append(FieldMismatch("status", expectation.status, error.status))
    if expectation.code is not None and error.code != expectation.code:
        mismatches.append(FieldMismatch("code", expectation.code, error.code))
    if expectation.message is not None:
        actual = error.message
        if actual is None or expectation.message not in actual:
            mismatches.append(FieldMismatch("message", expectation.message, actual, rule="contains"))
    return ComparisonResult(passed=not mismatches, mismatches=mismatches)
