"""
Authentication views.

Endpoints (under /api/v1/auth/):
    register/       - POST code + password, opens a session, returns JWT pair
    login/          - POST code + password, opens a session, returns JWT pair
    logout/         - POST, closes the session and blacklists the refresh token
    check/          - GET, reports the session user
    token/refresh/  - POST, simplejwt refresh

Related files:
    - services.py: AuthService
    - serializers.py: Request/response serialization
"""

import logging

from django.contrib.auth import login, logout
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from core.views import invalid_request_response, result_response

from authentication.serializers import (
    AuthResponseSerializer,
    LoginSerializer,
    LogoutSerializer,
    RegisterSerializer,
    UserSerializer,
)
from authentication.services import AuthService

logger = logging.getLogger(__name__)


def _auth_payload(user) -> dict:
    return {"user": UserSerializer(user).data, **AuthService.issue_tokens(user)}


class RegisterView(APIView):
    """
    POST /api/v1/auth/register/

    Request body:
        {"code": "NOVA-1234", "password": "secret1", "username": "...", "email": "..."}
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        summary="Register",
        tags=["Auth"],
        request=RegisterSerializer,
        responses={201: AuthResponseSerializer},
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_request_response(serializer.errors)

        result = AuthService.register(**serializer.validated_data)
        if not result:
            return result_response(result)

        user = result.data
        login(request._request, user, backend="django.contrib.auth.backends.ModelBackend")
        return result_response(
            result,
            success_status=status.HTTP_201_CREATED,
            data=_auth_payload(user),
        )


class LoginView(APIView):
    """
    POST /api/v1/auth/login/

    Request body:
        {"code": "NOVA-1234", "password": "secret1"}
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        summary="Log in",
        tags=["Auth"],
        request=LoginSerializer,
        responses={200: AuthResponseSerializer},
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_request_response(serializer.errors)

        result = AuthService.authenticate(
            request._request,
            serializer.validated_data["code"],
            serializer.validated_data["password"],
        )
        if not result:
            return result_response(result)

        user = result.data
        login(request._request, user)
        return result_response(result, data=_auth_payload(user))


class LogoutView(APIView):
    """
    POST /api/v1/auth/logout/

    Request body (optional):
        {"refresh": "<refresh token to blacklist>"}
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Log out", tags=["Auth"], request=LogoutSerializer)
    def post(self, request):
        serializer = LogoutSerializer(data=request.data)
        refresh = serializer.validated_data.get("refresh") if serializer.is_valid() else None

        if refresh:
            try:
                RefreshToken(refresh).blacklist()
            except TokenError:
                logger.info("Logout with an invalid refresh token", extra={"user_id": request.user.id})

        logout(request._request)
        return Response({"success": True})


class SessionCheckView(APIView):
    """
    GET /api/v1/auth/check/

    Returns the session user, or success=false when nobody is logged in.
    """

    permission_classes = [AllowAny]

    @extend_schema(summary="Check session", tags=["Auth"], responses={200: UserSerializer})
    def get(self, request):
        if request.user and request.user.is_authenticated:
            return Response({"success": True, "data": {"user": UserSerializer(request.user).data}})
        return Response({"success": False})
