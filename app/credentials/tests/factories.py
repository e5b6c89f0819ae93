"""
Factory Boy factories for credential test data.
"""

import factory

from authentication.tests.factories import UserFactory
from credentials.models import GenerationEvent, UsageStats


class GenerationEventFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = GenerationEvent

    user = factory.SubFactory(UserFactory)
    service = "netflix"
    credential = factory.Sequence(
        lambda n: {"email": f"account{n}@mail.test", "password": f"pw{n}"}
    )


class UsageStatsFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = UsageStats

    user = factory.SubFactory(UserFactory)
    total_generations = 0
    services = factory.LazyFunction(list)
