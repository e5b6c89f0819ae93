"""
PayPal IPN intake.

Notifications are stored as received and processed asynchronously via
Celery (see payments.tasks.process_payment_notification).

Usage:
    # In urls.py
    from payments.webhooks import paypal_ipn

    urlpatterns = [
        path("paypal/ipn/", paypal_ipn, name="paypal_ipn"),
    ]
"""

from payments.webhooks.views import paypal_ipn

__all__ = [
    "paypal_ipn",
]
