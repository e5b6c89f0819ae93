import uuid

import django.db.models.deletion
import django_fsm
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, help_text="Unique identifier (UUID4)", primary_key=True, serialize=False)),
                ("order_id", models.CharField(help_text="External order identifier supplied at registration", max_length=128, unique=True)),
                ("contact_tag", models.CharField(blank=True, default="", help_text="Buyer contact handle (e.g. Discord tag)", max_length=128)),
                ("total", models.CharField(help_text="Order total as a decimal string (e.g. '19.99')", max_length=32)),
                ("currency", models.CharField(default="EUR", help_text="ISO 4217 currency code (upper case)", max_length=3)),
                (
                    "status",
                    django_fsm.FSMField(
                        choices=[("pending", "Pending"), ("paid", "Paid")],
                        db_index=True,
                        default="pending",
                        help_text="Order status (managed by FSM)",
                        max_length=50,
                        protected=True,
                    ),
                ),
                ("txn_id", models.CharField(blank=True, default="", help_text="PayPal transaction id of the matched payment", max_length=64)),
                ("payer_email", models.CharField(blank=True, default="", help_text="Payer email reported by PayPal", max_length=254)),
                ("paid_at", models.DateTimeField(blank=True, help_text="When the order was marked paid", null=True)),
                ("version", models.PositiveIntegerField(default=1, help_text="Incremented on each save")),
            ],
            options={
                "verbose_name": "Order",
                "verbose_name_plural": "Orders",
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["status", "total", "currency"], name="order_amount_match_idx")],
            },
        ),
        migrations.CreateModel(
            name="PaymentNotification",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, help_text="Unique identifier (UUID4)", primary_key=True, serialize=False)),
                ("raw_body", models.TextField(help_text="Form-encoded body as received (used for verification)")),
                ("payload", models.JSONField(blank=True, default=dict, help_text="Parsed notification fields")),
                ("txn_id", models.CharField(blank=True, db_index=True, default="", help_text="PayPal transaction id", max_length=64)),
                ("source_ip", models.GenericIPAddressField(blank=True, help_text="Address the notification came from", null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("processing", "Processing"),
                            ("processed", "Processed"),
                            ("failed", "Failed"),
                        ],
                        db_index=True,
                        default="pending",
                        help_text="Current processing status",
                        max_length=20,
                    ),
                ),
                (
                    "outcome",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("paid", "Order marked paid"),
                            ("already_paid", "Order already paid"),
                            ("unmatched", "No matching order"),
                            ("unverified", "Not verified by PayPal"),
                            ("receiver_mismatch", "Receiver email mismatch"),
                            ("not_completed", "Payment not completed"),
                        ],
                        default="",
                        help_text="Reconciliation decision",
                        max_length=32,
                    ),
                ),
                ("error_message", models.TextField(blank=True, default="", help_text="Error details if processing failed")),
                ("processed_at", models.DateTimeField(blank=True, help_text="When processing finished", null=True)),
                (
                    "order",
                    models.ForeignKey(
                        blank=True,
                        help_text="Order matched by this notification",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="notifications",
                        to="payments.order",
                    ),
                ),
            ],
            options={
                "verbose_name": "Payment Notification",
                "verbose_name_plural": "Payment Notifications",
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["status", "created_at"], name="notification_status_idx")],
            },
        ),
    ]
