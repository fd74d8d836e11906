"""Test doubles shared across test modules."""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Tuple

from cellextest.core.dispatch import Dispatcher
from cellextest.core.models import Operation, Response
from cellextest.errors import DispatchError

Answer = Callable[[Mapping[str, Any]], Response]


class FakeClock:
    """Deterministic clock: ``sleep`` advances time instantly."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeDispatcher(Dispatcher):
    """Answers from a table keyed by operation label; records every call."""

    def __init__(self, answers: Mapping[str, Answer]) -> None:
        self.answers = dict(answers)
        self.calls: List[Tuple[Operation, Dict[str, Any]]] = []

    def dispatch(self, operation: Operation, payload: Mapping[str, Any]) -> Response:
        self.calls.append((operation, dict(payload)))
        return self.answers[operation.label()](payload)


def error(status: Any, code: Any = None, message: Any = None) -> Answer:
    def answer(_: Mapping[str, Any]) -> Response:
        raise DispatchError(status, {"code": code, "message": message})

    return answer


def ok(body: Any = None, status: int = 200) -> Answer:
    return lambda _: Response(status=status, body=body)
