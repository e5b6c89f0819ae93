"""
Tests for credential models.
"""

from datetime import datetime, timezone

import pytest

from core.exceptions import ConflictError
from credentials.models import GenerationEvent
from credentials.tests.factories import GenerationEventFactory, UsageStatsFactory

pytestmark = pytest.mark.django_db


class TestGenerationEvent:
    def test_cannot_be_updated(self):
        event = GenerationEventFactory()
        event.service = "spotify"

        with pytest.raises(ConflictError):
            event.save()

        event.refresh_from_db()
        assert event.service == "netflix"

    def test_for_user_newest_first(self, user):
        older = GenerationEventFactory(user=user)
        newer = GenerationEventFactory(user=user)
        GenerationEventFactory()
        GenerationEvent.objects.filter(pk=older.pk).update(
            created_at=datetime(2026, 1, 1, tzinfo=timezone.utc)
        )
        GenerationEvent.objects.filter(pk=newer.pk).update(
            created_at=datetime(2026, 1, 2, tzinfo=timezone.utc)
        )

        assert list(GenerationEvent.objects.for_user(user)) == [newer, older]


class TestUsageStats:
    def test_record_generation_keeps_first_use_order(self, user):
        stats = UsageStatsFactory(user=user)
        first = datetime(2026, 1, 1, tzinfo=timezone.utc)
        last = datetime(2026, 1, 3, tzinfo=timezone.utc)

        stats.record_generation("netflix", first)
        stats.record_generation("spotify", first)
        stats.record_generation("netflix", last)

        assert stats.total_generations == 3
        assert stats.services == ["netflix", "spotify"]
        assert stats.last_activity == last
