"""
Tests for PaymentReconciler.

PayPal verification is patched (fixtures ``verified`` / ``unverified``);
orders and notifications live in the test database.
"""

import uuid
from unittest.mock import patch

import pytest

from core.exceptions import LockAcquisitionError
from payments.models import Order, PaymentNotification
from payments.services import PaymentReconciler
from payments.state_machines import NotificationOutcome, NotificationStatus, OrderStatus
from payments.tests.factories import OrderFactory, PaymentNotificationFactory

pytestmark = pytest.mark.django_db


def _process(notification):
    result = PaymentReconciler.process_notification(notification.id)
    notification.refresh_from_db()
    return result


class TestOutcomes:
    def test_verified_completed_payment_marks_order_paid(self, verified, pending_order):
        notification = PaymentNotificationFactory(
            custom="ORD-42", payer_email="buyer@example.com", txn="TXN42"
        )

        result = _process(notification)

        assert result.data.outcome == NotificationOutcome.PAID
        order = Order.objects.get(pk=pending_order.pk)
        assert order.status == OrderStatus.PAID
        assert order.txn_id == "TXN42"
        assert order.payer_email == "buyer@example.com"
        assert notification.status == NotificationStatus.PROCESSED
        assert notification.outcome == NotificationOutcome.PAID
        assert notification.order_id == pending_order.pk
        verified.assert_called_once_with(notification.raw_body)

    def test_unverified_is_rejected(self, unverified, pending_order):
        notification = PaymentNotificationFactory(custom="ORD-42")

        result = _process(notification)

        assert result.data.outcome == NotificationOutcome.UNVERIFIED
        assert Order.objects.get(pk=pending_order.pk).status == OrderStatus.PENDING

    def test_receiver_mismatch_leaves_order_untouched(self, verified, pending_order):
        notification = PaymentNotificationFactory(
            custom="ORD-42", receiver_email="thief@example.com"
        )

        result = _process(notification)

        assert result.data.outcome == NotificationOutcome.RECEIVER_MISMATCH
        assert Order.objects.get(pk=pending_order.pk).status == OrderStatus.PENDING

    def test_receiver_compared_case_insensitively(self, verified, pending_order):
        notification = PaymentNotificationFactory(
            custom="ORD-42", receiver_email="Shop@Example.COM"
        )

        assert _process(notification).data.outcome == NotificationOutcome.PAID

    def test_business_field_used_without_receiver_email(self, verified, pending_order):
        notification = PaymentNotificationFactory(custom="ORD-42", receiver_email="")
        notification.payload["business"] = "shop@example.com"
        notification.save()

        assert _process(notification).data.outcome == NotificationOutcome.PAID

    def test_unconfigured_receiver_rejects_everything(self, verified, pending_order, settings):
        settings.PAYPAL_RECEIVER_EMAIL = ""
        notification = PaymentNotificationFactory(custom="ORD-42")

        assert _process(notification).data.outcome == NotificationOutcome.RECEIVER_MISMATCH

    @pytest.mark.parametrize("payment_status", ["Pending", "Refunded", "completed", ""])
    def test_not_completed(self, verified, pending_order, payment_status):
        notification = PaymentNotificationFactory(
            custom="ORD-42", payment_status=payment_status
        )

        assert _process(notification).data.outcome == NotificationOutcome.NOT_COMPLETED
        assert Order.objects.get(pk=pending_order.pk).status == OrderStatus.PENDING

    def test_unmatched(self, verified):
        OrderFactory(total="1.00")
        notification = PaymentNotificationFactory(custom="ORD-404", mc_gross="2.00")

        result = _process(notification)

        assert result.data.outcome == NotificationOutcome.UNMATCHED
        assert notification.order is None

    def test_amount_fallback(self, verified, pending_order):
        notification = PaymentNotificationFactory(mc_gross="19.99", mc_currency="EUR")

        result = _process(notification)

        assert result.data.outcome == NotificationOutcome.PAID
        assert result.data.order.pk == pending_order.pk

    def test_already_paid(self, verified, paid_order):
        notification = PaymentNotificationFactory(custom="ORD-7", txn="NEWTXN")

        result = _process(notification)

        assert result.data.outcome == NotificationOutcome.ALREADY_PAID
        assert Order.objects.get(pk=paid_order.pk).txn_id == "OLDTXN"

    def test_amount_fallback_ignores_paid_orders(self, verified, paid_order):
        notification = PaymentNotificationFactory(mc_gross="5.00")

        assert _process(notification).data.outcome == NotificationOutcome.UNMATCHED


class TestDuplicateDelivery:
    def test_second_delivery_is_already_paid(self, verified, pending_order):
        first = PaymentNotificationFactory(custom="ORD-42", txn="SAME")
        second = PaymentNotificationFactory(custom="ORD-42", txn="SAME")

        assert _process(first).data.outcome == NotificationOutcome.PAID
        assert _process(second).data.outcome == NotificationOutcome.ALREADY_PAID
        assert Order.objects.get(pk=pending_order.pk).version == 2

    def test_order_held_by_another_worker_is_not_touched(
        self, verified, pending_order, fake_redis, settings
    ):
        settings.ORDER_LOCK_TIMEOUT_SECONDS = 0.1
        fake_redis.set("lock:order:ORD-42", "other-worker", ex=30)
        notification = PaymentNotificationFactory(custom="ORD-42")

        result = _process(notification)

        assert result.error_code == "LOCK_ACQUISITION_FAILED"
        assert notification.status == NotificationStatus.FAILED
        assert Order.objects.get(pk=pending_order.pk).status == OrderStatus.PENDING


class TestProcessNotification:
    def test_unknown_notification(self):
        result = PaymentReconciler.process_notification(uuid.uuid4())

        assert result.error_code == "NOT_FOUND"

    def test_processed_notification_is_skipped(self, verified, pending_order):
        notification = PaymentNotificationFactory(custom="ORD-42")
        _process(notification)
        verified.reset_mock()

        result = _process(notification)

        assert result.data.skipped
        assert result.data.outcome == NotificationOutcome.PAID
        verified.assert_not_called()

    def test_failed_notification_can_be_retried(self, verified, pending_order):
        notification = PaymentNotificationFactory(custom="ORD-42")

        with patch.object(
            PaymentReconciler, "order_lock", side_effect=LockAcquisitionError("busy")
        ):
            result = _process(notification)

        assert not result.success
        assert notification.status == NotificationStatus.FAILED
        assert "busy" in notification.error_message
        assert Order.objects.get(pk=pending_order.pk).status == OrderStatus.PENDING

        assert _process(notification).data.outcome == NotificationOutcome.PAID
        assert PaymentNotification.objects.get(pk=notification.pk).error_message == ""
