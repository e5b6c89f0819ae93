"""
Project-wide pytest configuration for the app packages.

This module adjusts settings for the test run, auto-marks tests by filename
and provides fixtures shared by every app:

- fake_redis (autouse): in-memory stand-in for the Redis connection used by
  core.locks.DistributedLock
- pool_dir: temporary CREDENTIAL_POOL_DIR
"""

import os
import threading
import time

import pytest


def pytest_configure():
    """Adjust Django settings for the test run."""
    from django.conf import settings

    # Disable throttling during tests to prevent rate limit failures
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {}

    # Use fast password hasher for tests (PBKDF2 is too slow with 870K iterations)
    settings.PASSWORD_HASHERS = [
        "django.contrib.auth.hashers.MD5PasswordHasher",
    ]

    # No Redis server during tests
    settings.CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
            "LOCATION": "tests",
        }
    }
    settings.SESSION_ENGINE = "django.contrib.sessions.backends.db"

    # The test client speaks plain HTTP
    settings.SECURE_SSL_REDIRECT = False


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_integration.py → e2e (full user journey workflows)
    - test_views.py, test_services.py, test_tasks.py, etc. → integration
    - test_models.py, test_parsing.py, test_locks.py, etc. → unit
    - Unmatched files → integration (safe default for Django)

    Explicit markers on test functions/classes take precedence.
    """
    e2e_patterns = ["test_integration.py"]

    integration_patterns = [
        "test_views.py",
        "test_services.py",
        "test_tasks.py",
        "test_webhooks.py",
        "test_order_ledger.py",
        "test_reconciler.py",
        "test_pool.py",
        "test_commands.py",
    ]

    unit_patterns = [
        "test_models.py",
        "test_serializers.py",
        "test_parsing.py",
        "test_adapters.py",
        "test_paypal_adapter.py",
        "test_state_transitions.py",
        "test_locks.py",
        "test_exceptions.py",
    ]

    for item in items:
        # Skip if test already has unit/integration/e2e marker
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration", "e2e"}:
            continue

        filename = os.path.basename(str(item.fspath))

        if any(pattern in filename for pattern in e2e_patterns):
            item.add_marker(pytest.mark.e2e)
        elif any(pattern in filename for pattern in integration_patterns):
            item.add_marker(pytest.mark.integration)
        elif any(pattern in filename for pattern in unit_patterns):
            item.add_marker(pytest.mark.unit)
        else:
            # Default: integration (safe for Django where most tests hit DB)
            item.add_marker(pytest.mark.integration)


# =============================================================================
# Redis double
# =============================================================================


class FakeRedis:
    """
    Thread-safe in-memory subset of the redis client used by DistributedLock.

    Supports SET with NX/EX, GET, DELETE and the compare-and-delete Lua
    script of core.locks.
    """

    def __init__(self):
        self._data: dict[str, tuple[str, float | None]] = {}
        self._mutex = threading.Lock()

    def _live(self, key):
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and time.monotonic() >= expires_at:
            del self._data[key]
            return None
        return value

    def set(self, key, value, nx=False, ex=None):
        with self._mutex:
            if nx and self._live(key) is not None:
                return None
            expires_at = time.monotonic() + ex if ex else None
            self._data[key] = (value, expires_at)
            return True

    def get(self, key):
        with self._mutex:
            value = self._live(key)
            return value.encode() if value is not None else None

    def delete(self, *keys):
        with self._mutex:
            return sum(1 for key in keys if self._data.pop(key, None) is not None)

    def eval(self, script, numkeys, key, token, *args):
        with self._mutex:
            if self._live(key) != token:
                return 0
            if '"del"' in script:
                del self._data[key]
                return 1
            raise NotImplementedError(script)


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch):
    """Route DistributedLock to an in-memory Redis for every test."""
    redis = FakeRedis()
    monkeypatch.setattr("core.locks.get_redis_connection", lambda alias="default": redis)
    return redis


@pytest.fixture(autouse=True)
def _clear_cache():
    from django.core.cache import cache

    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def pool_dir(tmp_path, settings):
    """Empty credential pool directory wired into settings."""
    directory = tmp_path / "stocks"
    directory.mkdir()
    settings.CREDENTIAL_POOL_DIR = directory
    return directory
