"""Result data structures produced by the case runner."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .comparator import FieldMismatch
from .models import TestCase

PASSED = "passed"
FAILED = "failed"
SKIPPED = "skipped"


@dataclass(frozen=True)
class CaseOutcome:
    """Terminal state of a single case."""

    case: TestCase
    status: str
    duration_s: float = 0.0
    expected: Optional[str] = None
    actual: Optional[str] = None
    mismatches: Tuple[FieldMismatch, ...] = tuple()
    detail: str = ""
    reason: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.status == PASSED

    @property
    def failed(self) -> bool:
        return self.status == FAILED

    @property
    def skipped(self) -> bool:
        return self.status == SKIPPED


def passed(case: TestCase, *, duration_s: float = 0.0, actual: Optional[str] = None) -> CaseOutcome:
    return CaseOutcome(
        case=case,
        status=PASSED,
        duration_s=duration_s,
        expected=case.expectation.describe(),
        actual=actual,
    )


def failed(
    case: TestCase,
    *,
    actual: str,
    detail: str,
    mismatches: Sequence[FieldMismatch] = (),
    duration_s: float = 0.0,
) -> CaseOutcome:
    return CaseOutcome(
        case=case,
        status=FAILED,
        duration_s=duration_s,
        expected=case.expectation.describe(),
        actual=actual,
        mismatches=tuple(mismatches),
        detail=detail,
    )


def skipped(case: TestCase, reason: str, *, duration_s: float = 0.0) -> CaseOutcome:
    return CaseOutcome(case=case, status=SKIPPED, duration_s=duration_s, reason=reason)


@dataclass
class GroupSummary:
    group: str
    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0

    def add(self, outcome: CaseOutcome) -> None:
        self.total += 1
        if outcome.status == PASSED:
            self.passed += 1
        elif outcome.status == FAILED:
            self.failed += 1
        else:
            self.skipped += 1


@dataclass
class SuiteSummary:
    groups: List[GroupSummary] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(group.total for group in self.groups)

    @property
    def passed(self) -> int:
        return sum(group.passed for group in self.groups)

    @property
    def failed(self) -> int:
        return sum(group.failed for group in self.groups)

    @property
    def skipped(self) -> int:
        return sum(group.skipped for group in self.groups)

    def group(self, name: str) -> GroupSummary:
        for item in self.groups:
            if item.group == name:
                return item
        raise KeyError(name)


def summarize(outcomes: Sequence[CaseOutcome]) -> SuiteSummary:
    """Partition outcomes by group, keeping first-appearance group order."""

    groups: Dict[str, GroupSummary] = {}
    for outcome in outcomes:
        name = outcome.case.group
        if name not in groups:
            groups[name] = GroupSummary(group=name)
        groups[name].add(outcome)
    return SuiteSummary(groups=list(groups.values()))
