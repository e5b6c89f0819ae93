"""
PayPal notification reconciliation.

PaymentReconciler decides what a stored IPN delivery means for our orders:

    verify with PayPal ──no──> unverified
        │
    receiver is us ──no──> receiver_mismatch
        │
    payment_status == "Completed" ──no──> not_completed
        │
    match an order ──no──> unmatched
        │
    (order lock + row lock) already paid ──yes──> already_paid
        │
    mark paid ──> paid

Only the last step mutates anything. Replays and out-of-order deliveries of
the same payment end in already_paid.

Usage:
    from payments.services import PaymentReconciler

    result = PaymentReconciler.process_notification(notification.id)
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from django.conf import settings
from django.db import transaction

from core.exceptions import NotFoundError
from core.locks import DistributedLock
from core.services import BaseService, ServiceResult

from payments.adapters import PayPalAdapter
from payments.models import Order, PaymentNotification
from payments.services.order_ledger import OrderLedger
from payments.state_machines import NotificationOutcome

logger = logging.getLogger(__name__)

COMPLETED = "Completed"


@dataclass
class ReconcileDecision:
    """Outcome of one notification, plus the order it concerned (if any)."""

    outcome: str
    order: Order | None = None
    skipped: bool = False


class PaymentReconciler(BaseService):
    """Apply PayPal notifications to orders."""

    @classmethod
    def order_lock(cls, order_id: str) -> DistributedLock:
        return DistributedLock(
            f"order:{order_id}",
            ttl=settings.ORDER_LOCK_TTL_SECONDS,
            timeout=settings.ORDER_LOCK_TIMEOUT_SECONDS,
        )

    @classmethod
    def process_notification(
        cls, notification_id: uuid.UUID | str
    ) -> ServiceResult[ReconcileDecision]:
        """
        Reconcile a stored notification and record the decision on it.

        A notification that was already processed is skipped. Unexpected
        errors mark the notification failed and return a failure result.
        """
        notification = PaymentNotification.objects.filter(pk=notification_id).first()
        if notification is None:
            return ServiceResult.from_exception(
                NotFoundError(f"Notification {notification_id} not found")
            )

        if notification.is_processed:
            return ServiceResult.success(
                ReconcileDecision(
                    outcome=notification.outcome,
                    order=notification.order,
                    skipped=True,
                )
            )

        notification.mark_processing()
        notification.save(update_fields=["status", "updated_at"])

        try:
            decision = cls.reconcile(notification)
        except Exception as e:
            notification.mark_failed(str(e))
            notification.save(
                update_fields=["status", "error_message", "processed_at", "updated_at"]
            )
            return cls.handle_exception(e, f"reconcile notification {notification.id}")

        notification.mark_processed(decision.outcome, order=decision.order)
        notification.save(
            update_fields=[
                "status",
                "outcome",
                "order",
                "error_message",
                "processed_at",
                "updated_at",
            ]
        )
        return ServiceResult.success(decision)

    @classmethod
    def reconcile(cls, notification: PaymentNotification) -> ReconcileDecision:
        """
        Decide and apply the outcome of one notification.

        Raises:
            LockAcquisitionError: The order lock could not be acquired
            InvalidStateTransitionError: Should not happen, status is checked
                under the locks first
        """
        log_context = {
            "notification_id": str(notification.id),
            "txn_id": notification.field("txn_id"),
        }

        if not PayPalAdapter.verify_notification(notification.raw_body):
            logger.warning("Notification not verified by PayPal", extra=log_context)
            return ReconcileDecision(NotificationOutcome.UNVERIFIED)

        expected = (settings.PAYPAL_RECEIVER_EMAIL or "").strip().lower()
        receiver = (
            notification.field("receiver_email") or notification.field("business")
        ).strip().lower()
        if not expected or receiver != expected:
            logger.warning(
                "Notification receiver does not match",
                extra={**log_context, "receiver_email": receiver},
            )
            return ReconcileDecision(NotificationOutcome.RECEIVER_MISMATCH)

        payment_status = notification.field("payment_status")
        if payment_status != COMPLETED:
            logger.info(
                "Notification for a payment that is not completed",
                extra={**log_context, "payment_status": payment_status},
            )
            return ReconcileDecision(NotificationOutcome.NOT_COMPLETED)

        order = cls.match_order(notification)
        if order is None:
            logger.warning(
                "No order matches the notification",
                extra={
                    **log_context,
                    "custom": notification.field("custom"),
                    "invoice": notification.field("invoice"),
                    "memo": notification.field("memo"),
                    "mc_gross": notification.field("mc_gross"),
                    "mc_currency": notification.field("mc_currency"),
                    "payer_email": notification.field("payer_email"),
                },
            )
            return ReconcileDecision(NotificationOutcome.UNMATCHED)

        with cls.order_lock(order.order_id):
            with transaction.atomic():
                order = Order.objects.select_for_update().get(pk=order.pk)
                if order.is_paid:
                    logger.info(
                        "Order already paid",
                        extra={**log_context, "order_id": order.order_id},
                    )
                    return ReconcileDecision(NotificationOutcome.ALREADY_PAID, order)

                OrderLedger.mark_paid(
                    order,
                    txn_id=notification.field("txn_id"),
                    payer_email=notification.field("payer_email"),
                )

        return ReconcileDecision(NotificationOutcome.PAID, order)

    @classmethod
    def match_order(cls, notification: PaymentNotification) -> Order | None:
        """Order named by the notification, else a pending order of the same amount."""
        order = OrderLedger.find_for_notification(
            custom=notification.field("custom"),
            invoice=notification.field("invoice"),
            memo=notification.field("memo"),
        )
        if order is not None:
            return order
        return OrderLedger.find_pending_by_amount(
            notification.field("mc_gross"),
            notification.field("mc_currency"),
        )

