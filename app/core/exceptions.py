"""
Base exception classes and the error taxonomy shared by every app.

Every failure that crosses a component boundary is classified into one of
the ``ErrorCode`` kinds. Views translate the kind to an HTTP status with
``core.views.result_response``; nothing else about the failure leaks unless
the kind is user-correctable.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Missing or malformed input (INVALID_REQUEST)
    ├── NotFoundError - Resource not found
    ├── ConflictError - State conflicts (duplicates, concurrent modifications)
    │   └── LockAcquisitionError - Distributed lock timeout
    ├── ExternalServiceError - Third-party failures (UPSTREAM_FAILURE)
    └── InternalError - Storage and infrastructure failures (INTERNAL_FAILURE)

Usage:
    from core.exceptions import ErrorCode, ValidationError

    raise ValidationError("service is required")

    try:
        ...
    except BaseApplicationError as e:
        return ServiceResult.failure(e.message, e.error_code)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class ErrorCode:
    """
    Machine-readable failure kinds returned by services.

    INVALID_REQUEST: user-correctable, message is shown verbatim
    OUT_OF_STOCK: the requested pool is empty or unknown
    UNAUTHORIZED: identity missing or rejected, no detail given
    UPSTREAM_FAILURE: a provider call failed or timed out, retryable
    INTERNAL_FAILURE: storage or lock failure, logged with context
    """

    INVALID_REQUEST = "INVALID_REQUEST"
    OUT_OF_STOCK = "OUT_OF_STOCK"
    UNAUTHORIZED = "UNAUTHORIZED"
    UPSTREAM_FAILURE = "UPSTREAM_FAILURE"
    INTERNAL_FAILURE = "INTERNAL_FAILURE"


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code (an ErrorCode value for boundary errors)
        details: Additional error context (field errors, metadata, etc.)
    """

    default_error_code: str = ErrorCode.INTERNAL_FAILURE

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Example:
            {
                "error": "service is required",
                "error_code": "INVALID_REQUEST",
                "details": {"field": "service"}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails.

    Use for service-layer validation (blank service name, non-positive
    amount). DRF serializers handle request-shape validation.
    """

    default_error_code: str = ErrorCode.INVALID_REQUEST


class NotFoundError(BaseApplicationError):
    """Raised when a single resource that is expected to exist is missing."""

    default_error_code: str = "NOT_FOUND"


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with current resource state.

    Use for duplicate entries, concurrent modifications and invalid state
    transitions.
    """

    default_error_code: str = "CONFLICT"


class LockAcquisitionError(ConflictError):
    """
    Raised when a distributed lock cannot be acquired.

    Either the lock is held (non-blocking mode) or the wait timed out.
    Nothing guarded by the lock has been touched when this is raised.
    """

    default_error_code: str = "LOCK_ACQUISITION_FAILED"


class ExternalServiceError(BaseApplicationError):
    """
    Raised when an external service call fails.

    Log the original error for debugging but don't expose provider
    details to clients.
    """

    default_error_code: str = ErrorCode.UPSTREAM_FAILURE


class InternalError(BaseApplicationError):
    """Raised when local storage or infrastructure fails."""

    default_error_code: str = ErrorCode.INTERNAL_FAILURE
