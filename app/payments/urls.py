"""
URL configuration for the payments app.

All routes are prefixed with /api/v1/payments/ when included in the main URLconf.
"""

from django.urls import path

from payments.views import (
    CheckoutOrderCaptureView,
    CheckoutOrderCreateView,
    OrderRegisterView,
    OrderStatusView,
)
from payments.webhooks import paypal_ipn

app_name = "payments"

urlpatterns = [
    # Orders
    path("orders/register/", OrderRegisterView.as_view(), name="order_register"),
    path("orders/status/", OrderStatusView.as_view(), name="order_status"),
    # PayPal checkout
    path("checkout/orders/", CheckoutOrderCreateView.as_view(), name="checkout_create"),
    path(
        "checkout/orders/<str:provider_order_id>/capture/",
        CheckoutOrderCaptureView.as_view(),
        name="checkout_capture",
    ),
    # PayPal IPN
    path("paypal/ipn/", paypal_ipn, name="paypal_ipn"),
]
