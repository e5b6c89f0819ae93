"""
Authentication business logic.

AuthService is the Identity Provider of the credential service: it
registers users, checks code/password pairs and issues JWT pairs. Other
apps only ever see ``request.user``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.contrib.auth import authenticate
from django.db import IntegrityError
from rest_framework_simplejwt.tokens import RefreshToken

from core.exceptions import ErrorCode
from core.services import BaseService, ServiceResult

from authentication.models import User, UserRole

if TYPE_CHECKING:
    from django.http import HttpRequest


MIN_PASSWORD_LENGTH = 6


class AuthService(BaseService):
    """Register and authenticate users by registration code."""

    @classmethod
    def register(
        cls,
        code: str,
        password: str,
        username: str | None = None,
        email: str | None = None,
    ) -> ServiceResult[User]:
        """
        Create a user.

        The configured ADMIN_REGISTRATION_CODE grants the admin role and the
        premium flag.

        Failures (INVALID_REQUEST): missing code/password, password shorter
        than 6 characters, code already taken.
        """
        invalid = cls.validate_required(code=code, password=password)
        if invalid is not None:
            return invalid

        code = code.strip()
        if len(password) < MIN_PASSWORD_LENGTH:
            return ServiceResult.failure(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                error_code=ErrorCode.INVALID_REQUEST,
                errors={"password": ["Too short."]},
            )

        if User.objects.filter(code=code).exists():
            return ServiceResult.failure(
                "This code is already registered",
                error_code=ErrorCode.INVALID_REQUEST,
                errors={"code": ["Already registered."]},
            )

        is_admin = bool(settings.ADMIN_REGISTRATION_CODE) and (
            code == settings.ADMIN_REGISTRATION_CODE
        )

        try:
            with cls.atomic():
                user = User.objects.create_user(
                    code=code,
                    password=password,
                    username=(username or "").strip() or code,
                    email=email or "",
                    role=UserRole.ADMIN if is_admin else UserRole.USER,
                    is_premium=is_admin,
                )
        except IntegrityError:
            # Lost a race with a concurrent registration of the same code
            return ServiceResult.failure(
                "This code is already registered",
                error_code=ErrorCode.INVALID_REQUEST,
                errors={"code": ["Already registered."]},
            )

        cls.get_logger().info(
            "User registered",
            extra={"user_id": user.id, "role": user.role},
        )
        return ServiceResult.success(user)

    @classmethod
    def authenticate(
        cls,
        request: HttpRequest | None,
        code: str,
        password: str,
    ) -> ServiceResult[User]:
        """
        Check a code/password pair.

        Unknown code, wrong password and inactive account all produce the
        same UNAUTHORIZED failure.
        """
        if not code or not password:
            return ServiceResult.failure(
                "Invalid code or password",
                error_code=ErrorCode.UNAUTHORIZED,
            )

        user = authenticate(request, code=code.strip(), password=password)
        if user is None:
            cls.get_logger().info("Login rejected", extra={"code_length": len(code)})
            return ServiceResult.failure(
                "Invalid code or password",
                error_code=ErrorCode.UNAUTHORIZED,
            )
        return ServiceResult.success(user)

    @staticmethod
    def issue_tokens(user: User) -> dict[str, str]:
        """Return a fresh simplejwt access/refresh pair for the user."""
        refresh = RefreshToken.for_user(user)
        return {"access": str(refresh.access_token), "refresh": str(refresh)}
