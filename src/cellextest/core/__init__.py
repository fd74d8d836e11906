"""Core models and helpers exposed at the package level."""
from .models import (
    ExpectError,
    Expectation,
    ExpectSuccess,
    Operation,
    Response,
    SkipCondition,
    TestCase,
)
from .polling import Poller, PollResult, Succeeded, TimedOut, poll_until
from .sequencer import StepResult, act_then_verify, expect_increment

__all__ = [
    "ExpectError",
    "Expectation",
    "ExpectSuccess",
    "Operation",
    "Response",
    "SkipCondition",
    "TestCase",
    "Poller",
    "PollResult",
    "Succeeded",
    "TimedOut",
    "poll_until",
    "StepResult",
    "act_then_verify",
    "expect_increment",
]
