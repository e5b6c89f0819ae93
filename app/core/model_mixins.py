"""
Model mixins combined with BaseModel.

Available Mixins:
    UUIDPrimaryKeyMixin: Use UUID as primary key
    AppendOnlyMixin: Rows can be inserted but never updated

Usage:
    from core.models import BaseModel
    from core.model_mixins import AppendOnlyMixin, UUIDPrimaryKeyMixin

    class GenerationEvent(UUIDPrimaryKeyMixin, AppendOnlyMixin, BaseModel):
        service = models.CharField(max_length=64)
"""

from __future__ import annotations

import uuid

from django.db import models

from core.exceptions import ConflictError


class UUIDPrimaryKeyMixin(models.Model):
    """
    Use a random UUID as primary key instead of an auto-increment integer.

    IDs are generated before insert, are not guessable and don't reveal
    how many records exist.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier (UUID4)",
    )

    class Meta:
        abstract = True


class AppendOnlyMixin(models.Model):
    """
    Refuse updates to rows that already exist.

    save() on a loaded instance raises ConflictError. Queryset-level
    update() bypasses model save and is not guarded; don't use it on
    append-only models.
    """

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ConflictError(
                f"{self.__class__.__name__} records are immutable",
                error_code="IMMUTABLE_RECORD",
                details={"pk": str(self.pk)},
            )
        super().save(*args, **kwargs)
