"""Action-then-verify sequencing built on the condition poller."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .polling import Poller, Predicate, Probe, Succeeded

logger = logging.getLogger(__name__)

_UNSET = object()


@dataclass(frozen=True)
class StepResult:
    """Outcome of one action/post-condition pair."""

    ok: bool
    expected: Any
    observed: Any
    attempts: int = 0
    elapsed_s: float = 0.0
    description: str = ""
    error: Optional[str] = None

    def __bool__(self) -> bool:
        return self.ok

    def describe(self) -> str:
        label = self.description or "post-condition"
        if self.ok:
            return f"{label}: observed {self.observed!r} after {self.attempts} attempt(s)"
        text = f"{label}: expected {self.expected!r}, last observed {self.observed!r} after {self.elapsed_s:.2f}s"
        if self.error:
            text += f" (last probe error: {self.error})"
        return text


def act_then_verify(
    action: Callable[[], Any],
    probe: Probe,
    *,
    expected: Any = _UNSET,
    predicate: Optional[Predicate] = None,
    timeout_ms: Optional[int] = None,
    interval_ms: Optional[int] = None,
    poller: Optional[Poller] = None,
    description: str = "",
) -> StepResult:
    """Run ``action`` once, then poll ``probe`` until the post-condition holds.

    The post-condition is ``predicate`` when given, otherwise equality with
    ``expected``. The action is never retried; errors it raises propagate.
    """

    if predicate is None:
        if expected is _UNSET:
            raise ValueError("act_then_verify needs either expected or predicate")
        target = expected

        def predicate(value: Any) -> bool:
            return value == target

    poller = poller or Poller()
    action()
    result = poller.until(
        probe,
        predicate,
        timeout_ms=timeout_ms,
        interval_ms=interval_ms,
        description=description,
    )
    shown_expected = None if expected is _UNSET else expected
    if isinstance(result, Succeeded):
        return StepResult(
            ok=True,
            expected=shown_expected,
            observed=result.value,
            attempts=result.attempts,
            elapsed_s=result.elapsed_s,
            description=description,
        )
    logger.info("step %s timed out: last observed %r", description or "post-condition", result.last_value)
    return StepResult(
        ok=False,
        expected=shown_expected,
        observed=result.last_value,
        attempts=result.attempts,
        elapsed_s=result.elapsed_s,
        description=description,
        error=result.last_error,
    )


def expect_increment(
    action: Callable[[], Any],
    counter: Callable[[], int],
    *,
    by: int = 1,
    timeout_ms: Optional[int] = None,
    interval_ms: Optional[int] = None,
    poller: Optional[Poller] = None,
    description: str = "",
) -> StepResult:
    """Require ``counter()`` to equal its pre-action value plus ``by`` exactly."""

    before = counter()
    return act_then_verify(
        action,
        counter,
        expected=before + by,
        timeout_ms=timeout_ms,
        interval_ms=interval_ms,
        poller=poller,
        description=description or f"count {before} -> {before + by}",
    )
