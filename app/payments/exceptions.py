"""
Payment-specific exceptions.

Exception Hierarchy:
    PaymentError (base for payment domain)
    └── PaymentValidationError - Bad order/checkout input (also a core ValidationError)

    PayPalError - Base for all PayPal failures (inherits ExternalServiceError, UPSTREAM_FAILURE)
        ├── PayPalInvalidRequestError - PayPal rejected the request (permanent)
        ├── PayPalAuthenticationError - OAuth credentials rejected (permanent)
        ├── PayPalAPIUnavailableError - Connection error / 5xx (transient, retry)
        └── PayPalTimeoutError - Request timed out (transient, retry)

    InvalidStateTransitionError - Order transition not allowed (inherits ConflictError)

Usage:
    from payments.exceptions import PayPalError

    try:
        PayPalAdapter.create_order(amount, "EUR")
    except PayPalError as e:
        if e.is_retryable:
            ...
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    ErrorCode,
    ExternalServiceError,
    ValidationError,
)

if TYPE_CHECKING:
    from typing import Any


# =============================================================================
# Payment Domain Exceptions
# =============================================================================


class PaymentError(BaseApplicationError):
    """Base exception for all payment operations."""

    default_error_code: str = ErrorCode.INTERNAL_FAILURE


class PaymentValidationError(PaymentError, ValidationError):
    """
    Raised when order or checkout input is invalid.

    Example:
        raise PaymentValidationError(
            "Amount must be a positive number",
            details={"amount": amount},
        )
    """

    default_error_code: str = ErrorCode.INVALID_REQUEST


class InvalidStateTransitionError(ConflictError):
    """
    Raised when an order transition is not allowed from its current status.

    Example:
        raise InvalidStateTransitionError(
            "Order ORD-1 is already paid",
            details={"current_status": "paid", "target_status": "paid"},
        )
    """

    default_error_code: str = "INVALID_STATE_TRANSITION"


# =============================================================================
# PayPal Exceptions
# =============================================================================


class PayPalError(ExternalServiceError):
    """
    Base exception for PayPal failures.

    Attributes:
        paypal_code: PayPal's error name (e.g. "INVALID_REQUEST"), if any
        status_code: HTTP status returned by PayPal, if any
        is_retryable: Whether the same call may succeed later
    """

    default_error_code: str = ErrorCode.UPSTREAM_FAILURE
    is_retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        paypal_code: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if paypal_code:
            details["paypal_code"] = paypal_code
        if status_code:
            details["status_code"] = status_code
        super().__init__(message, error_code=error_code, details=details)
        self.paypal_code = paypal_code
        self.status_code = status_code


class PayPalInvalidRequestError(PayPalError):
    """
    PayPal rejected the request (4xx other than auth).

    Permanent: the same request will fail again. Usually a bad order id
    or an order that can't be captured.
    """

    is_retryable: bool = False


class PayPalAuthenticationError(PayPalError):
    """The client id/secret were rejected. Needs configuration changes."""

    is_retryable: bool = False


class PayPalAPIUnavailableError(PayPalError):
    """Connection failure or 5xx from PayPal. Safe to retry later."""

    is_retryable: bool = True


class PayPalTimeoutError(PayPalError):
    """No response within the configured timeout. Safe to retry later."""

    is_retryable: bool = True
