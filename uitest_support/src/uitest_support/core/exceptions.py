"""Custom exceptions for uitest-support."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from uitest_support.browser.lookup import LookupSpec
    from uitest_support.browser.tactics import TacticResult


class UITestSupportError(Exception):
    """Base exception for all uitest-support errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ElementNotFound(UITestSupportError):
    """Raised when every resolution tactic is exhausted without a visible match."""

    def __init__(
        self,
        spec: LookupSpec,
        attempts: list[TacticResult] | None = None,
        timeout: float | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(f"Element not found: {spec}", details)
        self.spec = spec
        self.attempts = list(attempts or [])
        self.timeout = timeout

    @property
    def tactics_tried(self) -> list[str]:
        """Names of the tactics that were attempted, in order."""
        return [attempt.tactic for attempt in self.attempts]


class MisuseError(UITestSupportError):
    """Raised when the aggregator lifecycle is driven out of order."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.operation = operation


class ValidationError(UITestSupportError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.field = field
        self.value = value


class ReportStorageError(UITestSupportError):
    """Raised when a run report cannot be written or read."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.path = path
