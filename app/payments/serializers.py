"""
DRF serializers for payments app.

Request field names follow the storefront's JSON (orderId, discordTag);
responses use the model's field names.
"""

from __future__ import annotations

from rest_framework import serializers

from payments.models import Order


class OrderRegisterSerializer(serializers.Serializer):
    orderId = serializers.CharField(max_length=128)
    discordTag = serializers.CharField(
        max_length=128, required=False, allow_blank=True, allow_null=True
    )
    total = serializers.CharField(max_length=32)
    currency = serializers.CharField(
        max_length=3, required=False, allow_blank=True, allow_null=True
    )


class OrderSerializer(serializers.ModelSerializer):
    class Meta:
        model = Order
        fields = [
            "order_id",
            "contact_tag",
            "total",
            "currency",
            "status",
            "txn_id",
            "payer_email",
            "paid_at",
            "created_at",
        ]
        read_only_fields = fields


class OrderRegisterResponseSerializer(serializers.Serializer):
    created = serializers.BooleanField()
    order = OrderSerializer()


class OrderStatusSerializer(serializers.Serializer):
    """``order`` is absent when status is "unknown"."""

    status = serializers.CharField()
    order = OrderSerializer(required=False)


class CheckoutCreateSerializer(serializers.Serializer):
    amount = serializers.CharField(max_length=32)
    currency = serializers.CharField(
        max_length=3, required=False, allow_blank=True, allow_null=True
    )


class CheckoutOrderSerializer(serializers.Serializer):
    id = serializers.CharField()
    status = serializers.CharField()


class CaptureSerializer(serializers.Serializer):
    id = serializers.CharField()
    status = serializers.CharField()
    details = serializers.JSONField(source="raw_response")
