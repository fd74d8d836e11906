"""Exception hierarchy shared by the harness."""
from __future__ import annotations

from typing import Any, Mapping, Optional


class CellexTestError(Exception):
    """Base exception for all harness errors."""


class CaseTableError(CellexTestError, ValueError):
    """Raised when a case table fails validation at load time."""


class DispatchError(CellexTestError):
    """The operation under test answered with an error response.

    ``status`` is ``None`` when no response was received at all (connection
    refused, timeout). ``body`` is the decoded response payload.
    """

    def __init__(
        self,
        status: Optional[int],
        body: Any = None,
        *,
        method: str = "",
        path: str = "",
    ) -> None:
        self.status = status
        self.body = body
        self.method = method
        self.path = path
        super().__init__(self._render())

    @property
    def code(self) -> Any:
        if isinstance(self.body, Mapping):
            return self.body.get("code")
        return None

    @property
    def message(self) -> Optional[str]:
        if isinstance(self.body, Mapping):
            value = self.body.get("message")
            return None if value is None else str(value)
        if isinstance(self.body, str) and self.body:
            return self.body
        return None

    def detail(self) -> str:
        """Compact status/code/message rendering used in failure reports."""

        parts = [f"status={self.status}"]
        if self.code is not None:
            parts.append(f"code={self.code}")
        if self.message is not None:
            parts.append(f"message={self.message!r}")
        return " ".join(parts)

    def _render(self) -> str:
        target = f"{self.method} {self.path}".strip()
        prefix = f"{target}: " if target else ""
        return f"{prefix}{self.detail()}"


class SetupFailure(CellexTestError):
    """A suite-wide precondition could not be established."""


class SkipCase(CellexTestError):
    """Raised while preparing a case that cannot run in this environment."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class PageError(CellexTestError):
    """Base class for page-object failures."""


class ElementNotFoundError(PageError):
    """An element did not appear within its wait window."""

    def __init__(self, locator: Any, timeout_ms: int) -> None:
        self.locator = locator
        self.timeout_ms = timeout_ms
        super().__init__(f"Element {locator!r} not found within {timeout_ms} ms")


class ConditionTimeoutError(PageError):
    """A mandatory wait timed out."""

    def __init__(self, description: str, timeout_ms: Optional[int] = None, last_value: Any = None) -> None:
        self.description = description
        self.timeout_ms = timeout_ms
        self.last_value = last_value
        window = f" within {timeout_ms} ms" if timeout_ms is not None else ""
        super().__init__(f"Timed out waiting for {description}{window} (last value: {last_value!r})")


class BrowserSetupError(CellexTestError):
    """The WebDriver session could not be created."""
