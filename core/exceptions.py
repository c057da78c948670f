# core/exceptions.py
from __future__ import annotations

from dataclasses import dataclass


class DomainError(Exception):
    """Base class for domain-level errors."""
    def __init__(self, message: str,*, code: str | None = None):
        super().__init__(message)
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when input data is invalid (e.g. a date range that ends before it starts)."""


class NotFoundError(DomainError):
    """Raised when an entity is not found."""


class ScopeUnavailableError(DomainError):
    """Raised when the workspace or user identity needed to scope a computation is missing."""


@dataclass(frozen=True)
class FetchFailure:
    """One rejected read against a single workspace; travels as result metadata."""
    source: str
    workspace_id: str | None
    message: str
    error_type: str

    @staticmethod
    def from_exception(source: str, workspace_id: str | None, exc: BaseException) -> "FetchFailure":
        return FetchFailure(
            source=source,
            workspace_id=workspace_id,
            message=str(exc),
            error_type=type(exc).__name__,
        )


class FetchFailureError(DomainError):
    """Raised when one or more read-port calls were rejected."""
    def __init__(self, message: str, failures: list[FetchFailure] | tuple[FetchFailure, ...] = (), *, code: str | None = None):
        super().__init__(message, code=code)
        self.failures: tuple[FetchFailure, ...] = tuple(failures)


class AnalyticsLoadError(FetchFailureError):
    """Raised when every source a view depends on failed; the view cannot be shown."""
