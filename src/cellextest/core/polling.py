"""Condition poller: probe repeatedly until a predicate holds or time runs out.

A timeout is an ordinary terminal state (``TimedOut``), not an exception.
Probe failures are treated as "not yet satisfied" and retried until the
deadline, so a probe that raises on every call still terminates.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar, Union

from cellextest.errors import ConditionTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_INTERVAL_MS = 500
DEFAULT_TIMEOUT_MS = 10000

Probe = Callable[[], Any]
Predicate = Callable[[Any], bool]


@dataclass(frozen=True)
class Succeeded(Generic[T]):
    """The predicate held on attempt ``attempts``."""

    value: T
    attempts: int = 1
    elapsed_s: float = 0.0

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self, description: str = "condition") -> T:
        return self.value


@dataclass(frozen=True)
class TimedOut:
    """The deadline elapsed without the predicate holding."""

    last_value: Any = None
    last_error: Optional[str] = None
    attempts: int = 0
    elapsed_s: float = 0.0
    timeout_ms: int = 0

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self, description: str = "condition") -> Any:
        raise ConditionTimeoutError(description, self.timeout_ms, self.last_value)


PollResult = Union[Succeeded, TimedOut]


def _truthy(value: Any) -> bool:
    return bool(value)


def poll_until(
    probe: Probe,
    predicate: Optional[Predicate] = None,
    *,
    interval_ms: int = DEFAULT_INTERVAL_MS,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
    description: str = "",
) -> PollResult:
    """Evaluate ``probe`` until ``predicate(value)`` holds or ``timeout_ms`` elapses."""

    check = predicate or _truthy
    interval_s = (interval_ms if interval_ms and interval_ms > 0 else DEFAULT_INTERVAL_MS) / 1000.0
    timeout_ms = max(int(timeout_ms), 0)
    start = clock()
    deadline = start + timeout_ms / 1000.0
    attempts = 0
    last_value: Any = None
    last_error: Optional[str] = None
    label = description or getattr(probe, "__name__", "probe")

    while True:
        attempts += 1
        try:
            value = probe()
            last_value = value
            last_error = None
            satisfied = check(value)
        except Exception as exc:  # transient probe failure
            last_error = f"{type(exc).__name__}: {exc}"
            logger.debug("poll %s attempt %d raised %s", label, attempts, last_error)
            satisfied = False
        now = clock()
        if satisfied:
            logger.debug("poll %s satisfied after %d attempt(s)", label, attempts)
            return Succeeded(value=last_value, attempts=attempts, elapsed_s=now - start)
        if now >= deadline:
            logger.debug("poll %s timed out after %d attempt(s), last=%r", label, attempts, last_value)
            return TimedOut(
                last_value=last_value,
                last_error=last_error,
                attempts=attempts,
                elapsed_s=now - start,
                timeout_ms=timeout_ms,
            )
        sleep(min(interval_s, deadline - now))


class Poller:
    """Holds default interval/timeout so callers only override per call."""

    def __init__(
        self,
        *,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.interval_ms = interval_ms if interval_ms and interval_ms > 0 else DEFAULT_INTERVAL_MS
        self.timeout_ms = timeout_ms
        self._clock = clock
        self._sleep = sleep

    def until(
        self,
        probe: Probe,
        predicate: Optional[Predicate] = None,
        *,
        timeout_ms: Optional[int] = None,
        interval_ms: Optional[int] = None,
        description: str = "",
    ) -> PollResult:
        return poll_until(
            probe,
            predicate,
            interval_ms=interval_ms if interval_ms is not None else self.interval_ms,
            timeout_ms=timeout_ms if timeout_ms is not None else self.timeout_ms,
            clock=self._clock,
            sleep=self._sleep,
            description=description,
        )

    def now(self) -> float:
        return self._clock()
