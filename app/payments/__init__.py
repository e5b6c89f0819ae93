"""
Payments app: locally registered orders and their PayPal reconciliation.

- models.Order: payment intent tracked locally (pending -> paid)
- models.PaymentNotification: every PayPal IPN delivery, stored as received
- services.OrderLedger: register / find / mark paid
- services.PaymentReconciler: verify an IPN and mark its order paid once
- services.CheckoutService: PayPal Orders v2 create / capture
- adapters.PayPalAdapter: all HTTP calls to PayPal

Usage:
    from payments.services import OrderLedger

    OrderLedger.register("ORD-1", total="19.99", contact_tag="buyer#0001")
"""
