"""
Pytest fixtures for payment tests.
"""

from unittest.mock import patch

import pytest
from rest_framework.test import APIClient

from payments.tests.factories import OrderFactory


@pytest.fixture(autouse=True)
def paypal_settings(settings):
    settings.PAYPAL_MODE = "sandbox"
    settings.PAYPAL_CLIENT_ID = "client-id"
    settings.PAYPAL_CLIENT_SECRET = "client-secret"
    settings.PAYPAL_RECEIVER_EMAIL = "shop@example.com"
    return settings


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def pending_order(db):
    return OrderFactory(order_id="ORD-42", total="19.99", currency="EUR")


@pytest.fixture
def paid_order(db):
    order = OrderFactory(order_id="ORD-7", total="5.00")
    order.mark_paid(txn_id="OLDTXN", payer_email="first@example.com")
    order.save()
    return order


@pytest.fixture
def verified():
    """PayPal answers VERIFIED to every postback."""
    with patch(
        "payments.services.reconciler.PayPalAdapter.verify_notification",
        return_value=True,
    ) as mock_verify:
        yield mock_verify


@pytest.fixture
def unverified():
    with patch(
        "payments.services.reconciler.PayPalAdapter.verify_notification",
        return_value=False,
    ) as mock_verify:
        yield mock_verify
