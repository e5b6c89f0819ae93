"""
PaymentNotification model for PayPal IPN deliveries.

Every delivery that reaches the IPN endpoint is stored as received and then
processed asynchronously. The raw body is kept byte-for-byte because PayPal
verification requires posting it back unchanged.

Deliveries are not deduplicated: PayPal may resend the same notification
and each attempt gets its own row. Replays are harmless because
reconciliation checks the order's status under a lock.

Usage:
    from payments.models import PaymentNotification

    notification = PaymentNotification.objects.create(
        raw_body=request.body.decode("latin-1"),
        payload=request.POST.dict(),
        txn_id=request.POST.get("txn_id", ""),
    )
"""

from __future__ import annotations

from django.db import models
from django.utils import timezone

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel

from payments.state_machines import NotificationOutcome, NotificationStatus


class PaymentNotification(UUIDPrimaryKeyMixin, BaseModel):
    """
    One PayPal IPN delivery.

    Processing Flow:
        1. IPN arrives, row stored with status PENDING
        2. Celery task marks it PROCESSING
        3. Reconciler decides an outcome
        4. Row is PROCESSED with that outcome, or FAILED on an unexpected error

    Fields:
        raw_body: Form-encoded body exactly as received
        payload: Parsed form fields
        txn_id: PayPal transaction id, if present
        status: Processing status
        outcome: Reconciliation decision (set when processed)
        order: Matched order, if any
        error_message: Details when processing failed
        processed_at: When processing finished
        source_ip: Sender address, for audit
    """

    # ==========================================================================
    # Delivery
    # ==========================================================================

    raw_body = models.TextField(
        help_text="Form-encoded body as received (used for verification)",
    )

    payload = models.JSONField(
        default=dict,
        blank=True,
        help_text="Parsed notification fields",
    )

    txn_id = models.CharField(
        max_length=64,
        blank=True,
        default="",
        db_index=True,
        help_text="PayPal transaction id",
    )

    source_ip = models.GenericIPAddressField(
        null=True,
        blank=True,
        help_text="Address the notification came from",
    )

    # ==========================================================================
    # Processing
    # ==========================================================================

    status = models.CharField(
        max_length=20,
        choices=NotificationStatus.choices,
        default=NotificationStatus.PENDING,
        db_index=True,
        help_text="Current processing status",
    )

    outcome = models.CharField(
        max_length=32,
        choices=NotificationOutcome.choices,
        blank=True,
        default="",
        help_text="Reconciliation decision",
    )

    order = models.ForeignKey(
        "payments.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notifications",
        help_text="Order matched by this notification",
    )

    error_message = models.TextField(
        blank=True,
        default="",
        help_text="Error details if processing failed",
    )

    processed_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When processing finished",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Payment Notification"
        verbose_name_plural = "Payment Notifications"
        indexes = [
            models.Index(fields=["status", "created_at"], name="notification_status_idx"),
        ]

    def __str__(self) -> str:
        return f"PaymentNotification({self.txn_id or self.id}, {self.status})"

    @property
    def is_processed(self) -> bool:
        return self.status == NotificationStatus.PROCESSED

    def field(self, name: str) -> str:
        """A payload field as a string, empty when absent."""
        value = (self.payload or {}).get(name)
        return "" if value is None else str(value)

    # ==========================================================================
    # Helper Methods
    # ==========================================================================

    def mark_processing(self) -> None:
        """Note: Does not save - caller must save after calling."""
        self.status = NotificationStatus.PROCESSING

    def mark_processed(self, outcome: str, order=None) -> None:
        """
        Record the reconciliation decision.

        Note: Does not save - caller must save after calling.
        """
        self.status = NotificationStatus.PROCESSED
        self.outcome = outcome
        self.order = order
        self.error_message = ""
        self.processed_at = timezone.now()

    def mark_failed(self, error_message: str) -> None:
        """Note: Does not save - caller must save after calling."""
        self.status = NotificationStatus.FAILED
        self.error_message = error_message
        self.processed_at = timezone.now()
