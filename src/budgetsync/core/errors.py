"""Error codes and user-friendly messages.

This module defines the error catalog for the API. Each error has:
- code: Unique identifier
- kind: Machine-readable error class (UNAUTHENTICATED, NOT_FOUND, ...)
- message: Technical description (for logs and API clients)
- user_message: User-friendly explanation
- suggestion: Actionable guidance for the user
- retry_allowed: Whether the error is retryable
"""

from dataclasses import dataclass

UNAUTHENTICATED = "UNAUTHENTICATED"
NOT_FOUND = "NOT_FOUND"
CONFLICT = "CONFLICT"
PRECONDITION_FAILED = "PRECONDITION_FAILED"
UPSTREAM_ERROR = "UPSTREAM_ERROR"
VALIDATION_ERROR = "VALIDATION_ERROR"
INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass
class ErrorDefinition:
    """Definition of a single error type."""

    code: str
    kind: str
    message: str
    user_message: str
    suggestion: str
    retry_allowed: bool


ERROR_CATALOG: dict[str, dict] = {
    "AUTH_001": {
        "code": "AUTH_001",
        "kind": UNAUTHENTICATED,
        "message": "Missing or invalid bearer credential",
        "user_message": "Unauthorized",
        "suggestion": "Sign in again and retry the request.",
        "retry_allowed": False,
    },
    "LINK_001": {
        "code": "LINK_001",
        "kind": PRECONDITION_FAILED,
        "message": "No access credential stored for this user",
        "user_message": "Bank not linked",
        "suggestion": "Link a bank account before syncing.",
        "retry_allowed": False,
    },
    "SYNC_001": {
        "code": "SYNC_001",
        "kind": CONFLICT,
        "message": "Sync cursor changed while this sync was running",
        "user_message": "Another sync finished first.",
        "suggestion": "Refresh to see the latest transactions.",
        "retry_allowed": True,
    },
    "PROV_001": {
        "code": "PROV_001",
        "kind": UPSTREAM_ERROR,
        "message": "Transaction provider request failed",
        "user_message": "We couldn't reach your bank right now.",
        "suggestion": "Please try again in a few moments.",
        "retry_allowed": True,
    },
    "PROV_002": {
        "code": "PROV_002",
        "kind": UPSTREAM_ERROR,
        "message": "Transaction provider request timed out",
        "user_message": "Your bank took too long to respond.",
        "suggestion": "Please try again in a few moments.",
        "retry_allowed": True,
    },
    "API_001": {
        "code": "API_001",
        "kind": NOT_FOUND,
        "message": "Category not found",
        "user_message": "Category not found",
        "suggestion": "Please refresh and try again.",
        "retry_allowed": False,
    },
    "API_002": {
        "code": "API_002",
        "kind": NOT_FOUND,
        "message": "Transaction not found",
        "user_message": "Transaction not found",
        "suggestion": "Please refresh and try again.",
        "retry_allowed": False,
    },
    "API_003": {
        "code": "API_003",
        "kind": NOT_FOUND,
        "message": "Account not found",
        "user_message": "Account not found",
        "suggestion": "Please refresh and try again.",
        "retry_allowed": False,
    },
    "API_004": {
        "code": "API_004",
        "kind": NOT_FOUND,
        "message": "Budget not found",
        "user_message": "Budget not found",
        "suggestion": "Please refresh and try again.",
        "retry_allowed": False,
    },
    "BUD_001": {
        "code": "BUD_001",
        "kind": CONFLICT,
        "message": "User already has a budget",
        "user_message": "User can only have one budget for now",
        "suggestion": "Edit your existing budget instead.",
        "retry_allowed": False,
    },
    "BUD_002": {
        "code": "BUD_002",
        "kind": CONFLICT,
        "message": "Account already initialized",
        "user_message": "Account already initialized",
        "suggestion": "Your default budget and categories already exist.",
        "retry_allowed": False,
    },
    "VAL_001": {
        "code": "VAL_001",
        "kind": VALIDATION_ERROR,
        "message": "Request body failed validation",
        "user_message": "Invalid input data",
        "suggestion": "Please check your input and try again.",
        "retry_allowed": True,
    },
    "DB_001": {
        "code": "DB_001",
        "kind": INTERNAL_ERROR,
        "message": "Database operation failed",
        "user_message": "A database error occurred",
        "suggestion": "Please try again later.",
        "retry_allowed": True,
    },
    "DB_002": {
        "code": "DB_002",
        "kind": CONFLICT,
        "message": "Resource already exists",
        "user_message": "This record already exists",
        "suggestion": "Please check if the record was already created.",
        "retry_allowed": False,
    },
    "SYS_001": {
        "code": "SYS_001",
        "kind": INTERNAL_ERROR,
        "message": "Internal server error",
        "user_message": "An unexpected error occurred",
        "suggestion": "Please try again later or contact support.",
        "retry_allowed": True,
    },
}


def get_error(error_code: str) -> dict:
    """Get error definition by code.

    Args:
        error_code: Error code from the catalog

    Returns:
        Dict with error details; a generic definition for unknown codes
    """
    if error_code not in ERROR_CATALOG:
        return {
            "code": "UNKNOWN",
            "kind": INTERNAL_ERROR,
            "message": f"Unknown error code: {error_code}",
            "user_message": "An unexpected error occurred.",
            "suggestion": "Please try again. Contact support if the problem persists.",
            "retry_allowed": True,
        }
    return ERROR_CATALOG[error_code]


def get_user_message(error_code: str) -> str:
    """Get user-friendly message for an error code."""
    return get_error(error_code)["user_message"]


def is_retryable(error_code: str) -> bool:
    """Check if an error is retryable."""
    return get_error(error_code)["retry_allowed"]
