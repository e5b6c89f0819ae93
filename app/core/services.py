"""
Base service layer patterns for business logic encapsulation.

This module provides foundational patterns for the service layer:
- ServiceResult: Standard result wrapper for consistent success/failure handling
- BaseService: Base class with common service utilities

Services never raise across their public boundary. Expected failures come
back as ``ServiceResult.failure(...)`` carrying an ``ErrorCode``; views turn
them into HTTP responses with ``core.views.result_response``.

Usage:
    from core.exceptions import ErrorCode
    from core.services import BaseService, ServiceResult

    class OrderLedger(BaseService):
        @classmethod
        def register(cls, order_id: str, total: str) -> ServiceResult[dict]:
            invalid = cls.validate_required(order_id=order_id, total=total)
            if invalid is not None:
                return invalid

            with cls.atomic():
                order, created = Order.objects.get_or_create(...)

            cls.get_logger().info("Order registered", extra={"order_id": order_id})
            return ServiceResult.success({"created": created, "order": order})
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from django.db import transaction

from core.exceptions import BaseApplicationError, ErrorCode

if TYPE_CHECKING:
    from collections.abc import Generator
    from typing import Any

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Standard result wrapper for service operations.

    Attributes:
        success: Whether the operation succeeded
        data: Result data. Usually None on failure, but a failure may carry
            data the caller must not lose (e.g. an orphaned credential).
        error: Error message if failed
        error_code: Machine-readable failure kind (see core.exceptions.ErrorCode)
        errors: Field-level errors for validation failures

    Usage:
        result = CredentialAllocator.generate(user, "netflix")
        if result:
            event = result.data
        elif result.error_code == ErrorCode.OUT_OF_STOCK:
            ...
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None
    errors: dict[str, list[str]] | None = field(default=None)

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        """Create a successful result."""
        return cls(success=True, data=data)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        errors: dict[str, list[str]] | None = None,
        data: T | None = None,
    ) -> ServiceResult[T]:
        """
        Create a failed result.

        Args:
            error: Human-readable error message
            error_code: Machine-readable failure kind
            errors: Field-level errors (for validation failures)
            data: Payload that must reach the caller despite the failure

        Example:
            return ServiceResult.failure("Out of stock", ErrorCode.OUT_OF_STOCK)
        """
        return cls(
            success=False,
            data=data,
            error=error,
            error_code=error_code or ErrorCode.INTERNAL_FAILURE,
            errors=errors,
        )

    @classmethod
    def from_exception(cls, exc: Exception, error_code: str | None = None) -> ServiceResult[T]:
        """
        Create a failed result from an exception.

        Application errors keep their own error code; anything else is an
        internal failure.
        """
        if isinstance(exc, BaseApplicationError):
            return cls(
                success=False,
                error=exc.message,
                error_code=error_code or exc.error_code,
            )
        return cls(
            success=False,
            error=str(exc),
            error_code=error_code or ErrorCode.INTERNAL_FAILURE,
        )

    def to_response(self) -> dict[str, Any]:
        """
        Convert to API response format.

        Returns:
            {"success": True, "data": ...} or
            {"success": False, "error": ..., "error_code": ..., "data"?: ...}
        """
        if self.success:
            return {"success": True, "data": self.data}

        response: dict[str, Any] = {
            "success": False,
            "error": self.error,
        }
        if self.error_code:
            response["error_code"] = self.error_code
        if self.errors:
            response["errors"] = self.errors
        if self.data is not None:
            response["data"] = self.data
        return response

    def __bool__(self) -> bool:
        return self.success


class BaseService:
    """
    Base class for service layer classes.

    Design Notes:
        - Use @classmethod (no instance state)
        - Use ServiceResult for expected failures
        - Raise exceptions internally, convert them at the public method edge
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get a logger named after the service class."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        Thin wrapper around django.db.transaction.atomic() that makes
        transaction boundaries explicit in service code.
        """
        with transaction.atomic():
            yield

    @classmethod
    def handle_exception(
        cls,
        exc: Exception,
        context: str = "",
        log_level: int = logging.ERROR,
    ) -> ServiceResult:
        """
        Convert exception to ServiceResult with logging.

        Example:
            try:
                PayPalAdapter.create_order(amount, currency)
            except PayPalError as e:
                return cls.handle_exception(e, "create checkout order")
        """
        logger = cls.get_logger()
        detail = exc.message if isinstance(exc, BaseApplicationError) else str(exc)
        message = f"{context}: {detail}" if context else detail
        logger.log(log_level, message, exc_info=log_level >= logging.ERROR)
        return ServiceResult.from_exception(exc)

    @classmethod
    def validate_required(cls, **kwargs) -> ServiceResult | None:
        """
        Validate that required fields are provided.

        Returns a failure result if any field is None or a blank string,
        None otherwise. A failure result is falsy, so check it with
        ``is not None``.

        Example:
            invalid = cls.validate_required(order_id=order_id, total=total)
            if invalid is not None:
                return invalid
        """
        errors = {}
        for field_name, value in kwargs.items():
            if value is None or (isinstance(value, str) and not value.strip()):
                errors[field_name] = ["This field is required."]

        if errors:
            missing = ", ".join(errors)
            return ServiceResult.failure(
                f"Missing required fields: {missing}",
                error_code=ErrorCode.INVALID_REQUEST,
                errors=errors,
            )
        return None
