"""
Payment adapters for external services.

All PayPal calls go through PayPalAdapter so that timeouts, error
translation and logging are handled in one place.

Usage:
    from payments.adapters import PayPalAdapter

    result = PayPalAdapter.create_order(Decimal("19.99"), "EUR")
    verified = PayPalAdapter.verify_notification(raw_body)
"""

from payments.adapters.paypal_adapter import (
    CaptureResult,
    CheckoutOrderResult,
    PayPalAdapter,
    format_amount,
)

__all__ = [
    "CaptureResult",
    "CheckoutOrderResult",
    "PayPalAdapter",
    "format_amount",
]
