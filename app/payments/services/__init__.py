"""
Payment services.

This module provides:
- OrderLedger: Registration, lookup and paid transition of orders
- PaymentReconciler: Turns verified PayPal notifications into paid orders
- CheckoutService: PayPal checkout order creation and capture

Usage:
    from payments.services import OrderLedger, PaymentReconciler

    result = OrderLedger.register("ORD-1", total="19.99", contact_tag="nova#0001")

    result = PaymentReconciler.process_notification(notification_id)
    if result:
        outcome = result.data.outcome
"""

from payments.services.checkout import CheckoutService, parse_amount
from payments.services.order_ledger import OrderLedger
from payments.services.reconciler import PaymentReconciler, ReconcileDecision

__all__ = [
    "CheckoutService",
    "OrderLedger",
    "PaymentReconciler",
    "ReconcileDecision",
    "parse_amount",
]
