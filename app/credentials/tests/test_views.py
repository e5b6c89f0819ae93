"""
Tests for the credentials API endpoints.
"""

from unittest.mock import patch

import pytest
from django.db import DatabaseError
from rest_framework.test import APIClient

from credentials.models import GenerationEvent
from credentials.services import CredentialAllocator
from credentials.tests.factories import GenerationEventFactory

pytestmark = pytest.mark.django_db

SERVICES_URL = "/api/v1/credentials/services/"
GENERATE_URL = "/api/v1/credentials/generate/"
HISTORY_URL = "/api/v1/credentials/history/"
STATS_URL = "/api/v1/credentials/stats/"


class TestServiceList:
    def test_public_and_reports_stock(self, settings, tmp_path, write_pool):
        settings.CREDENTIAL_CATALOG_FILE = tmp_path / "missing.json"
        write_pool("netflix", ["a:1", "b:2"])

        response = APIClient().get(SERVICES_URL)

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "data": [{"name": "netflix", "stock": 2}],
        }


class TestGenerate:
    def test_returns_parsed_account(self, auth_client, user, write_pool):
        write_pool("netflix", ["a@mail.test:pw1:profile 2"])

        response = auth_client.post(GENERATE_URL, {"service": "netflix"}, format="json")

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["service"] == "netflix"
        assert data["account"] == {
            "email": "a@mail.test",
            "password": "pw1",
            "additional_data": "profile 2",
        }
        assert data["generated_at"]
        assert GenerationEvent.objects.get(user=user).service == "netflix"

    def test_out_of_stock_is_404(self, auth_client, write_pool):
        write_pool("netflix", [])

        response = auth_client.post(GENERATE_URL, {"service": "netflix"}, format="json")

        assert response.status_code == 404
        assert response.json()["error_code"] == "OUT_OF_STOCK"

    def test_missing_service_is_400(self, auth_client, pool_dir):
        response = auth_client.post(GENERATE_URL, {}, format="json")

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_REQUEST"

    def test_path_traversal_is_400(self, auth_client, pool_dir):
        response = auth_client.post(GENERATE_URL, {"service": "../etc"}, format="json")

        assert response.status_code == 400

    def test_requires_authentication(self, write_pool):
        path = write_pool("netflix", ["a:1"])

        response = APIClient().post(GENERATE_URL, {"service": "netflix"}, format="json")

        assert response.status_code == 401
        assert path.read_text() == "a:1\n"

    def test_orphaned_account_is_returned_with_500(self, auth_client, write_pool):
        write_pool("netflix", ["a:1"])

        with patch.object(
            CredentialAllocator, "_record_generation", side_effect=DatabaseError("down")
        ):
            response = auth_client.post(GENERATE_URL, {"service": "netflix"}, format="json")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Internal error"
        assert body["data"]["account"] == {"username": "a", "password": "1"}


class TestHistory:
    def test_lists_own_generations(self, auth_client, user):
        GenerationEventFactory.create_batch(3, user=user)
        GenerationEventFactory()

        response = auth_client.get(HISTORY_URL)

        assert response.status_code == 200
        assert len(response.json()["data"]) == 3

    def test_limit_parameter(self, auth_client, user):
        GenerationEventFactory.create_batch(3, user=user)

        response = auth_client.get(HISTORY_URL, {"limit": 1})

        assert len(response.json()["data"]) == 1

    def test_bad_limit_is_400(self, auth_client):
        response = auth_client.get(HISTORY_URL, {"limit": "lots"})

        assert response.status_code == 400

    def test_requires_authentication(self):
        assert APIClient().get(HISTORY_URL).status_code == 401


class TestStats:
    def test_reports_counters(self, auth_client, write_pool):
        write_pool("netflix", ["a:1"])
        auth_client.post(GENERATE_URL, {"service": "netflix"}, format="json")

        response = auth_client.get(STATS_URL)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total_generations"] == 1
        assert data["services"] == ["netflix"]
        assert data["last_activity"] is not None
        assert len(data["recent_generations"]) == 1

    def test_requires_authentication(self):
        assert APIClient().get(STATS_URL).status_code == 401
