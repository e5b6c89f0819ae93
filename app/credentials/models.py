"""
Credential allocation records.

GenerationEvent is written once per successful pop and never changed.
UsageStats is the per-user aggregate, updated in the same transaction.

Usage:
    from credentials.models import GenerationEvent, UsageStats

    GenerationEvent.objects.for_user(user)[:50]
    UsageStats.objects.filter(user=user).first()
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from core.model_mixins import AppendOnlyMixin, UUIDPrimaryKeyMixin
from core.models import BaseModel


class GenerationEventQuerySet(models.QuerySet):
    def for_user(self, user) -> GenerationEventQuerySet:
        """Events of one user, newest first."""
        return self.filter(user=user).order_by("-created_at", "-id")


class GenerationEvent(UUIDPrimaryKeyMixin, AppendOnlyMixin, BaseModel):
    """
    One credential handed out to one user.

    Fields:
        user: Recipient
        service: Pool the credential came from
        credential: Parsed CredentialRecord (populated fields only)
        created_at: Issuance time (from BaseModel)
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="generation_events",
    )
    service = models.CharField(max_length=64, db_index=True)
    credential = models.JSONField(
        help_text="Parsed credential as delivered to the user",
    )

    objects = GenerationEventQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Generation Event"
        verbose_name_plural = "Generation Events"
        indexes = [
            models.Index(fields=["user", "created_at"], name="generation_user_created_idx"),
        ]

    def __str__(self) -> str:
        return f"GenerationEvent({self.id}, {self.service})"


class UsageStats(BaseModel):
    """
    Per-user allocation counters.

    Fields:
        user: Owner (also the primary key)
        total_generations: Successful generations so far
        services: Distinct services used, in first-use order
        last_activity: Time of the latest generation
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="usage_stats",
    )
    total_generations = models.PositiveIntegerField(default=0)
    services = models.JSONField(default=list, blank=True)
    last_activity = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = "Usage Stats"
        verbose_name_plural = "Usage Stats"

    def __str__(self) -> str:
        return f"UsageStats({self.user_id}, {self.total_generations})"

    def record_generation(self, service: str, at) -> None:
        """
        Count one generation.

        Note: Does not save - caller must save, holding a row lock.
        """
        self.total_generations += 1
        if service not in self.services:
            self.services = [*self.services, service]
        self.last_activity = at
