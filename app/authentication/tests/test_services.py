"""
Tests for AuthService.
"""

import pytest
from rest_framework_simplejwt.tokens import AccessToken

from core.exceptions import ErrorCode

from authentication.models import User, UserRole
from authentication.services import AuthService


@pytest.mark.django_db
class TestRegister:
    def test_creates_user_with_hashed_password(self):
        result = AuthService.register("NOVA-1", "secret1", username="Nova")

        assert result
        user = result.data
        assert user.code == "NOVA-1"
        assert user.username == "Nova"
        assert user.role == UserRole.USER
        assert user.is_premium is False
        assert user.check_password("secret1")
        assert user.password != "secret1"

    def test_username_defaults_to_code(self):
        result = AuthService.register("NOVA-2", "secret1")

        assert result.data.username == "NOVA-2"

    def test_short_password_rejected(self):
        result = AuthService.register("NOVA-3", "12345")

        assert result.error_code == ErrorCode.INVALID_REQUEST
        assert "password" in result.errors
        assert not User.objects.filter(code="NOVA-3").exists()

    @pytest.mark.parametrize("code", ["", "   "])
    def test_missing_code_rejected(self, code):
        result = AuthService.register(code, "secret1")

        assert result.error_code == ErrorCode.INVALID_REQUEST
        assert "code" in result.errors
        assert not User.objects.exists()

    def test_missing_password_rejected(self):
        result = AuthService.register("NOVA-4", None)

        assert result.error_code == ErrorCode.INVALID_REQUEST
        assert "password" in result.errors

    def test_duplicate_code_rejected(self, user):
        result = AuthService.register(user.code, "secret1")

        assert result.error_code == ErrorCode.INVALID_REQUEST
        assert User.objects.filter(code=user.code).count() == 1

    def test_admin_code_grants_admin_and_premium(self, settings):
        settings.ADMIN_REGISTRATION_CODE = "ADMIN-CODE"

        result = AuthService.register("ADMIN-CODE", "secret1")

        assert result.data.role == UserRole.ADMIN
        assert result.data.is_premium is True
        assert result.data.is_admin is True

    def test_blank_admin_code_grants_nothing(self, settings):
        settings.ADMIN_REGISTRATION_CODE = ""

        result = AuthService.register("ANY", "secret1")

        assert result.data.role == UserRole.USER


@pytest.mark.django_db
class TestAuthenticate:
    def test_valid_credentials(self, user):
        result = AuthService.authenticate(None, user.code, "testpass123")

        assert result
        assert result.data == user

    @pytest.mark.parametrize(
        ("code", "password"),
        [("NOVA-1234", "wrong-pass"), ("UNKNOWN", "testpass123"), ("", "x")],
    )
    def test_failures_share_one_message(self, user, code, password):
        result = AuthService.authenticate(None, code, password)

        assert result.error_code == ErrorCode.UNAUTHORIZED
        assert result.error == "Invalid code or password"

    def test_inactive_user_rejected(self, user):
        user.is_active = False
        user.save()

        result = AuthService.authenticate(None, user.code, "testpass123")

        assert result.error_code == ErrorCode.UNAUTHORIZED


@pytest.mark.django_db
def test_issue_tokens_identifies_user(user):
    tokens = AuthService.issue_tokens(user)

    assert set(tokens) == {"access", "refresh"}
    assert str(AccessToken(tokens["access"])["user_id"]) == str(user.id)
