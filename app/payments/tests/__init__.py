"""
Tests for payments app.

This package contains test modules for:
- test_models.py / test_state_transitions.py: Order and PaymentNotification
- test_order_ledger.py: OrderLedger registration, matching, settlement
- test_reconciler.py: IPN reconciliation outcomes
- test_checkout.py: CheckoutService and amount parsing
- test_paypal_adapter.py: PayPal REST and IPN verification calls
- test_tasks.py: Celery task
- test_views.py: API endpoints and the IPN endpoint
- test_admin.py: notification reprocess action

Usage:
    pytest payments/tests/
    pytest payments/tests/test_reconciler.py
"""
