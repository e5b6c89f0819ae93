"""
Payment domain models.

- Order: locally registered payment intent (pending -> paid)
- PaymentNotification: PayPal IPN deliveries, stored as received
"""

from payments.models.notification import PaymentNotification
from payments.models.order import Order

__all__ = [
    "Order",
    "PaymentNotification",
]
