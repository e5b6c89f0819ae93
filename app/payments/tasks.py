"""
Celery tasks for payment processing.

Usage:
    from payments.tasks import process_payment_notification

    # Queue a stored IPN delivery for reconciliation
    process_payment_notification.delay(str(notification.id))
"""

from __future__ import annotations

import logging

from celery import shared_task

from payments.services import PaymentReconciler

logger = logging.getLogger(__name__)


@shared_task(bind=True, acks_late=True)
def process_payment_notification(self, notification_id: str) -> dict:
    """
    Reconcile one stored PayPal notification.

    Not retried: a notification that could not be verified is rejected for
    good, and PayPal delivers the payment again on its own schedule.

    Returns:
        Dict with the processing status and, when decided, the outcome
    """
    logger.info(
        "Processing PayPal notification",
        extra={"notification_id": notification_id, "task_id": self.request.id},
    )

    result = PaymentReconciler.process_notification(notification_id)

    if not result:
        logger.warning(
            f"PayPal notification processing failed: {result.error}",
            extra={"notification_id": notification_id, "error_code": result.error_code},
        )
        return {
            "status": "failed",
            "notification_id": notification_id,
            "error": result.error,
        }

    decision = result.data
    order_id = decision.order.order_id if decision.order else None
    if decision.skipped:
        logger.info(
            "PayPal notification already processed, skipping",
            extra={"notification_id": notification_id},
        )
        return {
            "status": "already_processed",
            "notification_id": notification_id,
            "outcome": decision.outcome,
        }

    logger.info(
        f"PayPal notification processed: {decision.outcome}",
        extra={"notification_id": notification_id, "order_id": order_id},
    )
    return {
        "status": "processed",
        "notification_id": notification_id,
        "outcome": decision.outcome,
        "order_id": order_id,
    }
