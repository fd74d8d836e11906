"""Data-driven case runner: dispatch each case once and classify the outcome."""
from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional, Sequence

from cellextest.errors import DispatchError, SetupFailure, SkipCase

from . import results
from .comparator import compare_error
from .dispatch import Dispatcher
from .models import ExpectError, TestCase
from .results import CaseOutcome

logger = logging.getLogger(__name__)

ResultCallback = Callable[[CaseOutcome, int, int], None]


class CaseRunner:
    """Executes a case table sequentially, in table order, without retries."""

    def __init__(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher

    def run(
        self,
        cases: Sequence[TestCase],
        *,
        setup: Optional[Callable[[], None]] = None,
        prepare: Optional[Callable[[TestCase], TestCase]] = None,
        on_result: Optional[ResultCallback] = None,
    ) -> List[CaseOutcome]:
        outcomes: List[CaseOutcome] = []
        total = len(cases)

        def record(outcome: CaseOutcome) -> None:
            outcomes.append(outcome)
            if on_result:
                on_result(outcome, len(outcomes), total)

        aborted: Optional[str] = None
        if setup is not None:
            try:
                setup()
            except SetupFailure as exc:
                aborted = f"setup failed: {exc}"
                logger.warning("suite setup failed, skipping %d case(s): %s", total, exc)

        for case in cases:
            if aborted is not None:
                record(results.skipped(case, aborted))
                continue
            try:
                outcome = self._execute_case(case, prepare)
            except SetupFailure as exc:
                aborted = f"setup failed: {exc}"
                logger.warning("precondition lost at %s, skipping remaining cases: %s", case.id, exc)
                outcome = results.skipped(case, aborted)
            record(outcome)
        return outcomes

    def _execute_case(
        self,
        case: TestCase,
        prepare: Optional[Callable[[TestCase], TestCase]],
    ) -> CaseOutcome:
        start = time.perf_counter()
        try:
            target = prepare(case) if prepare is not None else case
        except SkipCase as exc:
            return results.skipped(case, exc.reason, duration_s=time.perf_counter() - start)

        try:
            response = self._dispatcher.dispatch(target.operation, target.payload)
        except DispatchError as error:
            duration = time.perf_counter() - start
            return self._classify_error(target, error, duration)
        except SetupFailure:
            raise
        except Exception as exc:  # unexpected harness or transport failure
            duration = time.perf_counter() - start
            logger.debug("case %s raised %s", case.id, exc, exc_info=True)
            actual = f"{type(exc).__name__}: {exc}"
            return results.failed(target, actual=actual, detail=f"unexpected exception {actual}", duration_s=duration)

        duration = time.perf_counter() - start
        actual = f"status={response.status}"
        if target.expects_success:
            if not response.ok:
                return results.failed(
                    target,
                    actual=actual,
                    detail=f"expected a 2xx response but got {actual}",
                    duration_s=duration,
                )
            return results.passed(target, duration_s=duration, actual=actual)
        return results.failed(
            target,
            actual=actual,
            detail=f"expected {target.expectation.describe()} but the request succeeded",
            duration_s=duration,
        )

    def _classify_error(self, case: TestCase, error: DispatchError, duration: float) -> CaseOutcome:
        if case.skip is not None and case.skip.matches(error):
            return results.skipped(case, case.skip.reason, duration_s=duration)
        actual = error.detail()
        if not isinstance(case.expectation, ExpectError):
            return results.failed(
                case,
                actual=actual,
                detail=f"expected success but got {actual}",
                duration_s=duration,
            )
        comparison = compare_error(case.expectation, error)
        if comparison.passed:
            return results.passed(case, duration_s=duration, actual=actual)
        return results.failed(
            case,
            actual=actual,
            detail=comparison.message,
            mismatches=comparison.mismatches,
            duration_s=duration,
        )
