"""
Tests for the Order state machine.

Order: pending → paid (terminal), status field protected.
"""

import pytest
from django_fsm import TransitionNotAllowed
from freezegun import freeze_time

from payments.models import Order
from payments.state_machines import OrderStatus
from payments.tests.factories import OrderFactory

pytestmark = pytest.mark.django_db


class TestOrderTransitions:
    def test_new_order_is_pending(self):
        order = OrderFactory()

        assert order.status == OrderStatus.PENDING
        assert not order.is_paid
        assert order.paid_at is None

    @freeze_time("2026-05-01 10:00:00")
    def test_mark_paid_records_payment(self):
        order = OrderFactory()

        order.mark_paid(txn_id="TXN1", payer_email="buyer@example.com")
        order.save()
        # Protected FSM fields cannot be reloaded in place
        order = Order.objects.get(pk=order.pk)

        assert order.status == OrderStatus.PAID
        assert order.txn_id == "TXN1"
        assert order.payer_email == "buyer@example.com"
        assert order.paid_at.isoformat().startswith("2026-05-01T10:00:00")

    def test_paid_order_cannot_be_paid_again(self, paid_order):
        with pytest.raises(TransitionNotAllowed):
            paid_order.mark_paid(txn_id="OTHER")

        assert paid_order.txn_id == "OLDTXN"

    def test_status_cannot_be_assigned_directly(self):
        order = OrderFactory()

        with pytest.raises(AttributeError):
            order.status = OrderStatus.PAID


class TestOrderVersion:
    def test_version_increments_on_each_save(self):
        order = OrderFactory()
        assert order.version == 1

        order.contact_tag = "changed#0001"
        order.save()
        assert order.version == 2

        order.mark_paid(txn_id="T")
        order.save()
        assert order.version == 3
