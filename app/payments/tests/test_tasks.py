"""
Tests for payment Celery tasks, run eagerly via .apply().
"""

import uuid

import pytest

from payments.state_machines import NotificationOutcome
from payments.tasks import process_payment_notification
from payments.tests.factories import PaymentNotificationFactory

pytestmark = pytest.mark.django_db


def _run(notification_id):
    return process_payment_notification.apply(args=[str(notification_id)]).get()


class TestProcessPaymentNotification:
    def test_processes_notification(self, verified, pending_order):
        notification = PaymentNotificationFactory(custom="ORD-42")

        result = _run(notification.id)

        assert result == {
            "status": "processed",
            "notification_id": str(notification.id),
            "outcome": NotificationOutcome.PAID,
            "order_id": "ORD-42",
        }

    def test_rejection_is_still_processed(self, unverified):
        notification = PaymentNotificationFactory()

        result = _run(notification.id)

        assert result["status"] == "processed"
        assert result["outcome"] == NotificationOutcome.UNVERIFIED
        assert result["order_id"] is None

    def test_second_run_is_skipped(self, verified, pending_order):
        notification = PaymentNotificationFactory(custom="ORD-42")
        _run(notification.id)

        result = _run(notification.id)

        assert result["status"] == "already_processed"
        assert verified.call_count == 1

    def test_unknown_notification(self):
        result = _run(uuid.uuid4())

        assert result["status"] == "failed"
