import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="GenerationEvent",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, help_text="Unique identifier (UUID4)", primary_key=True, serialize=False)),
                ("service", models.CharField(db_index=True, max_length=64)),
                ("credential", models.JSONField(help_text="Parsed credential as delivered to the user")),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="generation_events",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Generation Event",
                "verbose_name_plural": "Generation Events",
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["user", "created_at"], name="generation_user_created_idx")],
            },
        ),
        migrations.CreateModel(
            name="UsageStats",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        primary_key=True,
                        related_name="usage_stats",
                        serialize=False,
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                ("total_generations", models.PositiveIntegerField(default=0)),
                ("services", models.JSONField(blank=True, default=list)),
                ("last_activity", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "verbose_name": "Usage Stats",
                "verbose_name_plural": "Usage Stats",
            },
        ),
    ]
