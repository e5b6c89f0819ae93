"""
PayPal IPN endpoint.

The view:
1. Stores the delivery as a PaymentNotification (raw body kept verbatim)
2. Queues it for async reconciliation
3. Returns 200 with an empty body

PayPal only needs an acknowledgment. Authenticity is checked later by
posting the body back to PayPal, so nothing here can reject a delivery and
the response is 200 even when storing or queueing fails (those are logged).

Usage:
    # In urls.py
    from payments.webhooks.views import paypal_ipn

    urlpatterns = [
        path("paypal/ipn/", paypal_ipn, name="paypal_ipn"),
    ]
"""

from __future__ import annotations

import logging

from django.http import HttpRequest, HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from core.helpers import get_client_ip

from payments.models import PaymentNotification

logger = logging.getLogger(__name__)

# Bytes decode one-to-one in latin-1, so the stored body re-encodes to the
# exact bytes PayPal sent.
RAW_BODY_ENCODING = "latin-1"


@csrf_exempt
@require_POST
def paypal_ipn(request: HttpRequest) -> HttpResponse:
    """
    Receive and queue a PayPal IPN delivery.

    Returns:
        HttpResponse 200 with an empty body, always
    """
    try:
        payload = request.POST.dict()
        notification = PaymentNotification.objects.create(
            raw_body=request.body.decode(RAW_BODY_ENCODING),
            payload=payload,
            txn_id=payload.get("txn_id", "")[:64],
            source_ip=get_client_ip(request) or None,
        )
    except Exception as e:
        logger.error(
            f"Failed to store PayPal notification: {type(e).__name__}",
            exc_info=True,
        )
        return HttpResponse(status=200)

    logger.info(
        "PayPal notification received",
        extra={
            "notification_id": str(notification.id),
            "txn_id": notification.txn_id,
            "payment_status": payload.get("payment_status"),
        },
    )

    try:
        from payments.tasks import process_payment_notification

        process_payment_notification.delay(str(notification.id))
    except Exception as e:
        # Notification stays pending in the database
        logger.error(
            f"Failed to queue PayPal notification: {type(e).__name__}",
            extra={"notification_id": str(notification.id)},
            exc_info=True,
        )

    return HttpResponse(status=200)
