"""
Tests for OrderLedger: registration, lookup and settlement.
"""

import pytest
from freezegun import freeze_time

from core.exceptions import ErrorCode
from payments.exceptions import InvalidStateTransitionError
from payments.models import Order
from payments.services import OrderLedger
from payments.state_machines import OrderStatus
from payments.tests.factories import OrderFactory

pytestmark = pytest.mark.django_db


class TestRegister:
    def test_creates_pending_order(self):
        result = OrderLedger.register(" ORD-1 ", total=" 19.99 ", contact_tag="nova#0001", currency="eur")

        assert result.success
        assert result.data["created"] is True
        order = result.data["order"]
        assert order.order_id == "ORD-1"
        assert order.total == "19.99"
        assert order.currency == "EUR"
        assert order.contact_tag == "nova#0001"
        assert order.status == OrderStatus.PENDING

    def test_defaults_currency_to_eur(self):
        result = OrderLedger.register("ORD-1", total="5", currency=None)

        assert result.data["order"].currency == "EUR"

    def test_existing_order_is_left_unchanged(self, paid_order):
        result = OrderLedger.register(paid_order.order_id, total="999.00", contact_tag="other")

        assert result.success
        assert result.data["created"] is False
        assert result.data["order"].pk == paid_order.pk
        stored = Order.objects.get(pk=paid_order.pk)
        assert stored.total == "5.00"
        assert stored.status == OrderStatus.PAID
        assert Order.objects.count() == 1

    @pytest.mark.parametrize("total", ["", "abc", "0", "-1.00", "NaN", "Infinity"])
    def test_rejects_bad_total(self, total):
        result = OrderLedger.register("ORD-1", total=total)

        assert result.error_code == ErrorCode.INVALID_REQUEST
        assert not Order.objects.exists()

    @pytest.mark.parametrize("currency", ["EU", "EURO", "E1R"])
    def test_rejects_bad_currency(self, currency):
        result = OrderLedger.register("ORD-1", total="1.00", currency=currency)

        assert result.error_code == ErrorCode.INVALID_REQUEST
        assert "currency" in result.errors

    @pytest.mark.parametrize("order_id", ["", "   ", None])
    def test_requires_order_id(self, order_id):
        result = OrderLedger.register(order_id, total="1.00")

        assert result.error_code == ErrorCode.INVALID_REQUEST
        assert "order_id" in result.errors
        assert not Order.objects.exists()


class TestFindForNotification:
    def test_custom_wins_over_invoice_and_memo(self):
        by_custom = OrderFactory(order_id="A-1")
        OrderFactory(order_id="B-2")
        OrderFactory(order_id="C-3")

        order = OrderLedger.find_for_notification(custom="A-1", invoice="B-2", memo="for C-3")

        assert order == by_custom

    def test_invoice_when_custom_unknown(self):
        by_invoice = OrderFactory(order_id="B-2")

        assert OrderLedger.find_for_notification(custom="nope", invoice="B-2") == by_invoice

    def test_memo_substring(self):
        order = OrderFactory(order_id="ORD-77")

        assert OrderLedger.find_for_notification(memo="Thanks! order ORD-77 please") == order

    def test_memo_is_case_sensitive(self):
        OrderFactory(order_id="ORD-77")

        assert OrderLedger.find_for_notification(memo="order ord-77") is None

    def test_memo_matching_several_orders_picks_oldest(self):
        with freeze_time("2026-01-01"):
            oldest = OrderFactory(order_id="ORD-1")
        with freeze_time("2026-01-02"):
            OrderFactory(order_id="ORD-12")

        assert OrderLedger.find_for_notification(memo="ORD-12") == oldest

    def test_nothing_to_match(self):
        OrderFactory()

        assert OrderLedger.find_for_notification() is None


class TestFindPendingByAmount:
    def test_oldest_pending_order_with_same_amount(self, paid_order):
        with freeze_time("2026-01-01"):
            oldest = OrderFactory(total="5.00")
        with freeze_time("2026-01-02"):
            OrderFactory(total="5.00")

        assert OrderLedger.find_pending_by_amount("5.00", "eur") == oldest

    def test_total_compared_as_text(self):
        OrderFactory(total="5.00")

        assert OrderLedger.find_pending_by_amount("5.0", "EUR") is None

    def test_missing_amount(self):
        OrderFactory(total="5.00")

        assert OrderLedger.find_pending_by_amount("", "EUR") is None


class TestOrderStatus:
    def test_unknown(self):
        assert OrderLedger.order_status("ORD-404").data == {"status": "unknown"}

    def test_known(self, pending_order):
        data = OrderLedger.order_status("ORD-42").data

        assert data["status"] == "pending"
        assert data["order"] == pending_order

    @pytest.mark.parametrize("order_id", ["", "   "])
    def test_requires_order_id(self, order_id):
        result = OrderLedger.order_status(order_id)

        assert not result.success
        assert result.error_code == ErrorCode.INVALID_REQUEST


class TestMarkPaid:
    def test_marks_and_saves(self, pending_order):
        OrderLedger.mark_paid(pending_order, txn_id="TXN9", payer_email="p@example.com")

        stored = Order.objects.get(pk=pending_order.pk)
        assert stored.status == OrderStatus.PAID
        assert stored.txn_id == "TXN9"

    def test_paid_order_raises(self, paid_order):
        with pytest.raises(InvalidStateTransitionError):
            OrderLedger.mark_paid(paid_order, txn_id="TXN9")
