"""
Order model for locally registered payments.

An order is registered by the storefront before the buyer pays, then
reconciled against PayPal notifications. The only transition is
pending -> paid, performed once through django-fsm.

Usage:
    from payments.models import Order

    order = Order.objects.create(order_id="ORD-1", total="19.99", currency="EUR")

    order.mark_paid(txn_id="5TY05013RG002845M", payer_email="buyer@example.com")
    order.save()
"""

from __future__ import annotations

from django.db import models
from django.db.models import F
from django.utils import timezone

from django_fsm import FSMField, transition

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel

from payments.state_machines import OrderStatus


class OrderQuerySet(models.QuerySet):
    def pending(self) -> OrderQuerySet:
        return self.filter(status=OrderStatus.PENDING)

    def matching_amount(self, total: str, currency: str) -> OrderQuerySet:
        """Orders with this exact total string and currency (any case)."""
        return self.filter(total=total, currency__iexact=currency)


class Order(UUIDPrimaryKeyMixin, BaseModel):
    """
    A payment intent tracked locally.

    Fields:
        order_id: Caller-supplied external identifier (unique)
        contact_tag: Buyer's contact handle (e.g. a Discord tag)
        total: Amount as a decimal string, stored exactly as registered
        currency: ISO 4217 code, upper case
        status: pending or paid (FSM, protected)
        txn_id / payer_email / paid_at: Set by mark_paid()
        version: Incremented on every save, for diagnosing concurrent writes

    Note:
        total is a string on purpose: PayPal reports mc_gross as text and
        matching compares the two strings exactly.
    """

    # ==========================================================================
    # Identification
    # ==========================================================================

    order_id = models.CharField(
        max_length=128,
        unique=True,
        help_text="External order identifier supplied at registration",
    )

    contact_tag = models.CharField(
        max_length=128,
        blank=True,
        default="",
        help_text="Buyer contact handle (e.g. Discord tag)",
    )

    # ==========================================================================
    # Amount & Currency
    # ==========================================================================

    total = models.CharField(
        max_length=32,
        help_text="Order total as a decimal string (e.g. '19.99')",
    )

    currency = models.CharField(
        max_length=3,
        default="EUR",
        help_text="ISO 4217 currency code (upper case)",
    )

    # ==========================================================================
    # State
    # ==========================================================================

    status = FSMField(
        default=OrderStatus.PENDING,
        choices=OrderStatus.choices,
        db_index=True,
        protected=True,
        help_text="Order status (managed by FSM)",
    )

    # ==========================================================================
    # Payment Details (set when paid)
    # ==========================================================================

    txn_id = models.CharField(
        max_length=64,
        blank=True,
        default="",
        help_text="PayPal transaction id of the matched payment",
    )

    payer_email = models.CharField(
        max_length=254,
        blank=True,
        default="",
        help_text="Payer email reported by PayPal",
    )

    paid_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the order was marked paid",
    )

    # ==========================================================================
    # Concurrency Control
    # ==========================================================================

    version = models.PositiveIntegerField(
        default=1,
        help_text="Incremented on each save",
    )

    objects = OrderQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Order"
        verbose_name_plural = "Orders"
        indexes = [
            models.Index(fields=["status", "total", "currency"], name="order_amount_match_idx"),
        ]

    def __str__(self) -> str:
        return f"Order({self.order_id}, {self.status}, {self.total} {self.currency})"

    def save(self, *args, **kwargs):
        """Save, bumping version atomically on updates."""
        is_update = not self._state.adding and not kwargs.get("force_insert", False)
        if is_update:
            self.version = F("version") + 1
        super().save(*args, **kwargs)
        if is_update:
            self.refresh_from_db(fields=["version"])

    @property
    def is_paid(self) -> bool:
        return self.status == OrderStatus.PAID

    # ==========================================================================
    # State Transitions (django-fsm)
    # ==========================================================================

    @transition(
        field=status,
        source=OrderStatus.PENDING,
        target=OrderStatus.PAID,
    )
    def mark_paid(self, txn_id: str = "", payer_email: str = ""):
        """
        Record the matched payment.

        Transition: PENDING -> PAID

        Raises django_fsm.TransitionNotAllowed on a paid order.
        Does not save - caller must save after calling.
        """
        self.txn_id = txn_id or ""
        self.payer_email = payer_email or ""
        self.paid_at = timezone.now()
