"""Reporter interface definitions."""
from __future__ import annotations

from typing import List, Sequence

from cellextest.core.results import CaseOutcome, SuiteSummary
from cellextest.suite.models import Suite


class Reporter:
    """Interface for output renderers."""

    def on_start(self, suite: Suite, total: int) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def on_case_result(self, outcome: CaseOutcome, index: int, total: int) -> None:  # pragma: no cover
        raise NotImplementedError

    def on_complete(self, outcomes: Sequence[CaseOutcome], summary: SuiteSummary) -> None:  # pragma: no cover
        raise NotImplementedError


class ReportManager:
    """Dispatches lifecycle callbacks to multiple reporters."""

    def __init__(self, reporters: Sequence[Reporter]) -> None:
        self._reporters = list(reporters)

    def start(self, suite: Suite, total: int) -> None:
        for reporter in self._reporters:
            reporter.on_start(suite, total)

    def handle_result(self, outcome: CaseOutcome, index: int, total: int) -> None:
        for reporter in self._reporters:
            reporter.on_case_result(outcome, index, total)

    def complete(self, outcomes: Sequence[CaseOutcome], summary: SuiteSummary) -> None:
        for reporter in self._reporters:
            reporter.on_complete(outcomes, summary)

    def reporters(self) -> List[Reporter]:
        return list(self._reporters)
