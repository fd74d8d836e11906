"""Core dataclasses shared across cellextest subsystems."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple, Union

from cellextest.errors import DispatchError

ENCODINGS = ("json", "multipart")


@dataclass(frozen=True)
class Operation:
    """The action a case invokes: an HTTP endpoint or a named operation."""

    method: str = "POST"
    path: str = ""
    encoding: str = "json"
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.encoding not in ENCODINGS:
            raise ValueError(f"encoding must be one of {ENCODINGS} (got {self.encoding!r})")
        if not self.name and not self.path:
            raise ValueError("operation requires either a path or a name")

    @property
    def is_named(self) -> bool:
        return bool(self.name)

    def label(self) -> str:
        if self.name:
            return self.name
        return f"{self.method.upper()} {self.path}"


@dataclass(frozen=True)
class ExpectSuccess:
    """The dispatch must complete with a 2xx response."""

    def describe(self) -> str:
        return "success"


@dataclass(frozen=True)
class ExpectError:
    """The dispatch must fail; every declared field must match."""

    status: Optional[int] = None
    code: Optional[int] = None
    message: Optional[str] = None

    def __post_init__(self) -> None:
        if self.status is None and self.code is None and self.message is None:
            raise ValueError("ExpectError requires at least one of status, code, message")

    def describe(self) -> str:
        parts = []
        if self.status is not None:
            parts.append(f"status={self.status}")
        if self.code is not None:
            parts.append(f"code={self.code}")
        if self.message is not None:
            parts.append(f"message~={self.message!r}")
        return "error " + " ".join(parts)


Expectation = Union[ExpectSuccess, ExpectError]


@dataclass(frozen=True)
class SkipCondition:
    """Skip the case when the dispatch fails with ``status``."""

    status: int
    reason: str

    def matches(self, error: DispatchError) -> bool:
        return error.status == self.status


@dataclass(frozen=True)
class Response:
    """Successful dispatch result."""

    status: int
    body: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


@dataclass(frozen=True)
class TestCase:
    """One declarative input/expectation pair."""

    __test__ = False  # not a pytest test class

    id: str
    group: str
    description: str
    operation: Operation
    payload: Mapping[str, Any] = field(default_factory=dict)
    expectation: Expectation = field(default_factory=ExpectSuccess)
    skip: Optional[SkipCondition] = None
    requires: Tuple[str, ...] = tuple()
    tags: Tuple[str, ...] = tuple()

    @property
    def expects_success(self) -> bool:
        return isinstance(self.expectation, ExpectSuccess)

    def identifier(self) -> str:
        return f"{self.id}: {self.description}" if self.description else self.id
