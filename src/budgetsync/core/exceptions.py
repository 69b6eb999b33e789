"""Custom exception classes for the budget sync service.

Every exception carries an error_code from the catalog in errors.py and the
HTTP status it maps to. The API layer turns them into JSON error bodies.
"""

from typing import Any

from budgetsync.core import errors


class BudgetSyncError(Exception):
    """Base exception for all service errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "API_001")
        message: Optional override for the catalog message (shown to clients)
        details: Additional context about the error (for logging)
        http_status: HTTP status code to return
    """

    kind: str = errors.INTERNAL_ERROR
    default_status: int = 500

    def __init__(
        self,
        error_code: str,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        http_status: int | None = None,
    ):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        self.http_status = http_status or self.default_status
        super().__init__(message or error_code)


class UnauthenticatedError(BudgetSyncError):
    """Raised when the caller's bearer credential is missing or invalid."""

    kind = errors.UNAUTHENTICATED
    default_status = 401


class NotFoundError(BudgetSyncError):
    """Raised for unknown category, transaction, account or budget ids."""

    kind = errors.NOT_FOUND
    default_status = 404


class ConflictError(BudgetSyncError):
    """Raised on duplicate budgets, repeated initialization and lost sync races."""

    kind = errors.CONFLICT
    default_status = 409


class PreconditionFailedError(BudgetSyncError):
    """Raised when an operation needs a linked bank and none is stored."""

    kind = errors.PRECONDITION_FAILED
    default_status = 400


class UpstreamError(BudgetSyncError):
    """Raised when the transaction provider fails or times out.

    The provider's message is passed through to the client; stack traces
    never are.
    """

    kind = errors.UPSTREAM_ERROR
    default_status = 500


class ValidationError(BudgetSyncError):
    """Raised when a request body is malformed or misses required fields."""

    kind = errors.VALIDATION_ERROR
    default_status = 400
