"""
DRF views for payments app.

Endpoints (under /api/v1/payments/):
    POST orders/register/                          - Register a pending order
    GET  orders/status/?orderId=                   - Order status
    POST checkout/orders/                          - Create a PayPal order
    POST checkout/orders/<provider_order_id>/capture/ - Capture a PayPal order
    POST paypal/ipn/                               - PayPal IPN (payments.webhooks)

Related files:
    - services/: OrderLedger, CheckoutService
    - serializers.py: Request/response serializers
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from core.views import invalid_request_response, result_response

from payments.serializers import (
    CaptureSerializer,
    CheckoutCreateSerializer,
    CheckoutOrderSerializer,
    OrderRegisterResponseSerializer,
    OrderRegisterSerializer,
    OrderSerializer,
    OrderStatusSerializer,
)
from payments.services import CheckoutService, OrderLedger


class OrderRegisterView(APIView):
    """
    POST /api/v1/payments/orders/register/

    Request body:
        {"orderId": "ORD-1", "discordTag": "nova#0001", "total": "19.99", "currency": "EUR"}

    Responses:
        201: order created
        200: order_id already registered (existing order returned unchanged)
        400: missing orderId/total, or invalid total/currency
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        summary="Register an order",
        tags=["Payments"],
        request=OrderRegisterSerializer,
        responses={200: OrderRegisterResponseSerializer, 201: OrderRegisterResponseSerializer},
    )
    def post(self, request):
        serializer = OrderRegisterSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_request_response(serializer.errors)

        data = serializer.validated_data
        result = OrderLedger.register(
            order_id=data["orderId"],
            total=data["total"],
            contact_tag=data.get("discordTag"),
            currency=data.get("currency"),
        )
        if not result:
            return result_response(result)
        return result_response(
            result,
            success_status=status.HTTP_201_CREATED if result.data["created"] else status.HTTP_200_OK,
            data={
                "created": result.data["created"],
                "order": OrderSerializer(result.data["order"]).data,
            },
        )


class OrderStatusView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        summary="Order status",
        tags=["Payments"],
        parameters=[OpenApiParameter("orderId", str, required=True)],
        responses={200: OrderStatusSerializer},
    )
    def get(self, request):
        result = OrderLedger.order_status(request.query_params.get("orderId", ""))
        if not result:
            return result_response(result)

        data = {"status": result.data["status"]}
        if "order" in result.data:
            data["order"] = OrderSerializer(result.data["order"]).data
        return result_response(result, data=data)


class CheckoutOrderCreateView(APIView):
    """
    POST /api/v1/payments/checkout/orders/

    Request body:
        {"amount": "19.99", "currency": "EUR"}

    Responses:
        201: {"success": true, "data": {"id": "<paypal order id>", "status": "CREATED"}}
        400: amount missing, not a number, or <= 0
        502: PayPal failure
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        summary="Create a PayPal order",
        tags=["Payments"],
        request=CheckoutCreateSerializer,
        responses={201: CheckoutOrderSerializer},
    )
    def post(self, request):
        serializer = CheckoutCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_request_response(serializer.errors, message="Invalid amount")

        result = CheckoutService.create_order(
            serializer.validated_data["amount"],
            serializer.validated_data.get("currency"),
        )
        if not result:
            return result_response(result)
        return result_response(
            result,
            success_status=status.HTTP_201_CREATED,
            data=CheckoutOrderSerializer(result.data).data,
        )


class CheckoutOrderCaptureView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        summary="Capture a PayPal order",
        tags=["Payments"],
        request=None,
        responses={200: CaptureSerializer},
    )
    def post(self, request, provider_order_id: str):
        result = CheckoutService.capture_order(provider_order_id)
        if not result:
            return result_response(result)
        return result_response(result, data=CaptureSerializer(result.data).data)
