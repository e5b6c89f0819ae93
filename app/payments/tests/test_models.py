"""
Tests for Order queries and PaymentNotification helpers.
"""

import pytest

from payments.models import Order, PaymentNotification
from payments.state_machines import NotificationOutcome, NotificationStatus
from payments.tests.factories import OrderFactory, PaymentNotificationFactory

pytestmark = pytest.mark.django_db


class TestOrderQuerySet:
    def test_pending_excludes_paid(self, pending_order, paid_order):
        assert list(Order.objects.pending()) == [pending_order]

    def test_matching_amount_is_exact_on_total(self):
        match = OrderFactory(total="19.99", currency="EUR")
        OrderFactory(total="19.990", currency="EUR")
        OrderFactory(total="19.99", currency="USD")

        assert list(Order.objects.matching_amount("19.99", "eur")) == [match]


class TestPaymentNotification:
    def test_field_returns_strings(self):
        notification = PaymentNotification(payload={"mc_gross": "1.00", "count": 3})

        assert notification.field("mc_gross") == "1.00"
        assert notification.field("count") == "3"
        assert notification.field("missing") == ""

    def test_factory_body_matches_payload(self):
        notification = PaymentNotificationFactory(custom="ORD-1")

        assert "custom=ORD-1" in notification.raw_body
        assert notification.field("custom") == "ORD-1"
        assert notification.txn_id == notification.field("txn_id")

    def test_processing_lifecycle(self, pending_order):
        notification = PaymentNotificationFactory()
        assert notification.status == NotificationStatus.PENDING

        notification.mark_processing()
        assert notification.status == NotificationStatus.PROCESSING

        notification.mark_processed(NotificationOutcome.PAID, order=pending_order)
        notification.save()
        notification.refresh_from_db()

        assert notification.is_processed
        assert notification.outcome == NotificationOutcome.PAID
        assert notification.order == pending_order
        assert notification.processed_at is not None
        assert list(pending_order.notifications.all()) == [notification]

    def test_mark_failed(self):
        notification = PaymentNotificationFactory()

        notification.mark_failed("boom")

        assert notification.status == NotificationStatus.FAILED
        assert notification.error_message == "boom"
        assert not notification.is_processed
