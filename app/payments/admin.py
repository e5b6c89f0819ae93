"""
Payment admin configuration.

Orders change state only through reconciliation, so the status and payment
fields are read-only here.
"""

from django.contrib import admin

from payments.models import Order, PaymentNotification
from payments.state_machines import NotificationStatus


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Admin configuration for Order.

    State changes should be made through the service layer, not admin.
    """

    list_display = [
        "order_id",
        "contact_tag",
        "amount_display",
        "status",
        "txn_id",
        "paid_at",
        "created_at",
    ]
    list_filter = ["status", "currency", "created_at"]
    search_fields = ["order_id", "contact_tag", "txn_id", "payer_email"]
    readonly_fields = [
        "id",
        "status",
        "txn_id",
        "payer_email",
        "paid_at",
        "version",
        "created_at",
        "updated_at",
    ]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]

    fieldsets = (
        (
            None,
            {
                "fields": ("id", "order_id", "contact_tag", "status"),
            },
        ),
        (
            "Amount",
            {
                "fields": ("total", "currency"),
            },
        ),
        (
            "Payment Details",
            {
                "fields": ("txn_id", "payer_email", "paid_at"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at", "version"),
                "classes": ("collapse",),
            },
        ),
    )

    @admin.display(description="Amount")
    def amount_display(self, obj: Order) -> str:
        return f"{obj.total} {obj.currency}"


@admin.register(PaymentNotification)
class PaymentNotificationAdmin(admin.ModelAdmin):
    """
    Admin configuration for PaymentNotification.

    Notifications are an audit trail: never added or deleted here, and the
    received data is immutable.
    """

    list_display = [
        "id",
        "txn_id",
        "status",
        "outcome",
        "order",
        "processed_at",
        "created_at",
    ]
    list_filter = ["status", "outcome", "created_at"]
    search_fields = ["id", "txn_id", "order__order_id"]
    readonly_fields = [
        "id",
        "raw_body",
        "payload",
        "txn_id",
        "source_ip",
        "status",
        "outcome",
        "order",
        "error_message",
        "processed_at",
        "created_at",
        "updated_at",
    ]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]
    actions = ["reprocess"]

    fieldsets = (
        (
            None,
            {
                "fields": ("id", "txn_id", "status", "outcome", "order"),
            },
        ),
        (
            "Processing",
            {
                "fields": ("processed_at", "error_message"),
            },
        ),
        (
            "Delivery",
            {
                "fields": ("source_ip", "payload", "raw_body"),
                "classes": ("collapse",),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )

    def has_delete_permission(self, request, obj=None) -> bool:
        return False

    def has_add_permission(self, request) -> bool:
        return False

    @admin.action(description="Reprocess selected pending/failed notifications")
    def reprocess(self, request, queryset):
        from payments.tasks import process_payment_notification

        queued = 0
        for notification in queryset.exclude(status=NotificationStatus.PROCESSED):
            process_payment_notification.delay(str(notification.id))
            queued += 1
        self.message_user(request, f"Queued {queued} notification(s) for processing.")
