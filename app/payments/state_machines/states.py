"""
State enums for payment models.

Order States (django-fsm):
    pending → paid (terminal)

PaymentNotification processing:
    pending → processing → processed (a decision was reached)
    pending → processing → failed (unexpected error)

A processed notification also records its NotificationOutcome.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    """
    States of a locally registered order.

    PENDING: registered, waiting for a matching verified payment
    PAID: a verified, completed payment was matched (terminal)
    """

    PENDING = "pending", "Pending"
    PAID = "paid", "Paid"


class NotificationStatus(models.TextChoices):
    """Processing status of a stored PayPal notification."""

    PENDING = "pending", "Pending"
    PROCESSING = "processing", "Processing"
    PROCESSED = "processed", "Processed"
    FAILED = "failed", "Failed"


class NotificationOutcome(models.TextChoices):
    """
    What reconciliation decided for a notification.

    Only PAID mutates an order. Every other outcome leaves orders untouched.
    """

    PAID = "paid", "Order marked paid"
    ALREADY_PAID = "already_paid", "Order already paid"
    UNMATCHED = "unmatched", "No matching order"
    UNVERIFIED = "unverified", "Not verified by PayPal"
    RECEIVER_MISMATCH = "receiver_mismatch", "Receiver email mismatch"
    NOT_COMPLETED = "not_completed", "Payment not completed"
