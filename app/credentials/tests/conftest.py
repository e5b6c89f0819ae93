import pytest
from rest_framework.test import APIClient

from authentication.tests.factories import UserFactory


@pytest.fixture
def user(db):
    return UserFactory()


@pytest.fixture
def auth_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def write_pool(pool_dir):
    """Write a pool file: write_pool("netflix", ["a:b", "c:d"])."""

    def _write(service, lines, newline="\n"):
        path = pool_dir / f"{service}.txt"
        path.write_text(newline.join(lines) + newline, encoding="utf-8", newline="")
        return path

    return _write
