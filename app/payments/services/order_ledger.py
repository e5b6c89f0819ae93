"""
Order ledger service.

OrderLedger is the only writer of Order rows. Orders are registered by the
storefront ahead of payment and marked paid by the reconciler.

Usage:
    from payments.services import OrderLedger

    result = OrderLedger.register("ORD-1", total="19.99", contact_tag="nova#0001")
    result.data["created"]   # False when ORD-1 already existed

    result = OrderLedger.order_status("ORD-1")
    result.data["status"]    # "pending", "paid" or "unknown"
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any

from django.db import IntegrityError
from django.db.models import F, Value
from django_fsm import TransitionNotAllowed

from core.exceptions import ErrorCode
from core.services import BaseService, ServiceResult

from payments.exceptions import InvalidStateTransitionError
from payments.models import Order
from payments.state_machines import OrderStatus

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "EUR"
CURRENCY_RE = re.compile(r"^[A-Z]{3}$")


def _is_positive_decimal(value: str) -> bool:
    try:
        number = Decimal(value)
    except InvalidOperation:
        return False
    return number.is_finite() and number > 0


class OrderLedger(BaseService):
    """Register, look up and settle orders."""

    # =========================================================================
    # Registration
    # =========================================================================

    @classmethod
    def register(
        cls,
        order_id: str,
        total: Any,
        contact_tag: str | None = "",
        currency: str | None = DEFAULT_CURRENCY,
    ) -> ServiceResult[dict[str, Any]]:
        """
        Register a pending order.

        Registering an order_id that already exists is a successful no-op
        (created=False); the existing order is left unchanged.

        Returns:
            ServiceResult with {"created": bool, "order": Order}
        """
        invalid = cls.validate_required(order_id=order_id, total=total)
        if invalid is not None:
            return invalid

        order_id = str(order_id).strip()
        total = str(total).strip()
        currency = (currency or DEFAULT_CURRENCY).strip().upper()

        errors = {}
        if not _is_positive_decimal(total):
            errors["total"] = ["Must be a positive decimal amount."]
        if not CURRENCY_RE.match(currency):
            errors["currency"] = ["Must be a 3-letter currency code."]
        if errors:
            return ServiceResult.failure(
                "Invalid order",
                error_code=ErrorCode.INVALID_REQUEST,
                errors=errors,
            )

        existing = cls.find_by_order_id(order_id)
        if existing is not None:
            return ServiceResult.success({"created": False, "order": existing})

        try:
            with cls.atomic():
                order = Order.objects.create(
                    order_id=order_id,
                    contact_tag=(contact_tag or "").strip(),
                    total=total,
                    currency=currency,
                )
        except IntegrityError:
            # Lost a concurrent insert of the same order_id
            return ServiceResult.success(
                {"created": False, "order": Order.objects.get(order_id=order_id)}
            )

        logger.info(
            "Order registered",
            extra={"order_id": order_id, "total": total, "currency": currency},
        )
        return ServiceResult.success({"created": True, "order": order})

    # =========================================================================
    # Lookup
    # =========================================================================

    @classmethod
    def find_by_order_id(cls, order_id: str) -> Order | None:
        if not order_id:
            return None
        return Order.objects.filter(order_id=order_id).first()

    @classmethod
    def find_pending_by_amount(cls, total: str, currency: str) -> Order | None:
        """Oldest pending order with exactly this total and currency."""
        if not total or not currency:
            return None
        return (
            Order.objects.pending()
            .matching_amount(total, currency)
            .order_by("created_at", "id")
            .first()
        )

    @classmethod
    def find_for_notification(
        cls,
        custom: str = "",
        invoice: str = "",
        memo: str = "",
    ) -> Order | None:
        """
        Order referenced by a notification.

        Tried in order: order_id equal to ``custom``, equal to ``invoice``,
        contained in ``memo`` (case-sensitive, oldest order wins).
        """
        for reference in (custom, invoice):
            order = cls.find_by_order_id(reference)
            if order is not None:
                return order

        if not memo:
            return None

        # Some backends match LIKE case-insensitively, so confirm in Python
        candidates = (
            Order.objects.annotate(memo_text=Value(memo))
            .filter(memo_text__contains=F("order_id"))
            .order_by("created_at", "id")
        )
        for order in candidates:
            if order.order_id and order.order_id in memo:
                return order
        return None

    @classmethod
    def order_status(cls, order_id: str) -> ServiceResult[dict[str, Any]]:
        """
        Status of an order.

        Returns:
            {"status": "unknown"} when absent, else {"status": ..., "order": Order}
        """
        invalid = cls.validate_required(order_id=order_id)
        if invalid is not None:
            return invalid

        order = cls.find_by_order_id(order_id.strip())
        if order is None:
            return ServiceResult.success({"status": "unknown"})
        return ServiceResult.success({"status": order.status, "order": order})

    # =========================================================================
    # Transitions
    # =========================================================================

    @classmethod
    def mark_paid(cls, order: Order, txn_id: str = "", payer_email: str = "") -> Order:
        """
        Transition an order to paid and save it.

        Callers hold the order lock and a row lock, and check the status first.

        Raises:
            InvalidStateTransitionError: Order is not pending
        """
        try:
            order.mark_paid(txn_id=txn_id, payer_email=payer_email)
        except TransitionNotAllowed as e:
            raise InvalidStateTransitionError(
                f"Order {order.order_id} cannot be marked paid",
                details={"current_status": order.status, "target_status": OrderStatus.PAID},
            ) from e

        order.save()
        logger.info(
            "Order marked paid",
            extra={"order_id": order.order_id, "txn_id": txn_id},
        )
        return order
