"""
PayPal checkout service.

Thin service edge over PayPalAdapter: validates input and turns PayPal
failures into UPSTREAM_FAILURE results.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from core.exceptions import ErrorCode, ValidationError
from core.services import BaseService, ServiceResult

from payments.adapters import CaptureResult, CheckoutOrderResult, PayPalAdapter
from payments.exceptions import PaymentValidationError, PayPalError


def parse_amount(value: Any) -> Decimal:
    """
    Checkout amount as a Decimal.

    Raises:
        PaymentValidationError: Missing, not a number, NaN/infinite, or <= 0
    """
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise PaymentValidationError("Invalid amount", details={"amount": value})
    if not amount.is_finite() or amount <= 0:
        raise PaymentValidationError("Invalid amount", details={"amount": value})
    return amount


class CheckoutService(BaseService):
    """Create and capture PayPal checkout orders."""

    @classmethod
    def create_order(cls, amount: Any, currency: str | None = None) -> ServiceResult[CheckoutOrderResult]:
        if amount is None or amount == "":
            return ServiceResult.failure(
                "Invalid amount",
                error_code=ErrorCode.INVALID_REQUEST,
                errors={"amount": ["This field is required."]},
            )
        try:
            value = parse_amount(amount)
        except ValidationError as e:
            return ServiceResult.failure(
                e.message,
                error_code=e.error_code,
                errors={"amount": ["Must be a positive number."]},
            )

        try:
            return ServiceResult.success(PayPalAdapter.create_order(value, currency or "EUR"))
        except PayPalError as e:
            return cls.handle_exception(e, "create checkout order")

    @classmethod
    def capture_order(cls, provider_order_id: str) -> ServiceResult[CaptureResult]:
        invalid = cls.validate_required(provider_order_id=provider_order_id)
        if invalid is not None:
            return invalid

        try:
            return ServiceResult.success(PayPalAdapter.capture_order(provider_order_id))
        except PayPalError as e:
            return cls.handle_exception(e, "capture checkout order")
