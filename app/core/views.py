"""
Core views and response helpers.

- health_check: infrastructure endpoint for Docker/load balancers
- result_response: turns a ServiceResult into a DRF Response, mapping each
  ErrorCode to its HTTP status
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.core.cache import cache
from django.db import connection
from django.http import JsonResponse
from rest_framework import status
from rest_framework.response import Response

from core.exceptions import ErrorCode

if TYPE_CHECKING:
    from core.services import ServiceResult

logger = logging.getLogger(__name__)


ERROR_STATUS_CODES = {
    ErrorCode.INVALID_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorCode.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.OUT_OF_STOCK: status.HTTP_404_NOT_FOUND,
    ErrorCode.UPSTREAM_FAILURE: status.HTTP_502_BAD_GATEWAY,
    ErrorCode.INTERNAL_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Messages of these kinds are replaced before reaching the client
GENERIC_MESSAGES = {
    ErrorCode.UNAUTHORIZED: "Authentication required",
    ErrorCode.UPSTREAM_FAILURE: "Payment provider unavailable, please retry",
    ErrorCode.INTERNAL_FAILURE: "Internal error",
}


def result_response(
    result: ServiceResult,
    success_status: int = status.HTTP_200_OK,
    data=None,
) -> Response:
    """
    Build the HTTP response for a service result.

    Args:
        result: The service outcome
        success_status: Status used when the result succeeded
        data: Serialized payload to send instead of result.data on success

    Unknown error codes are treated as internal failures.
    """
    if result.success:
        payload = result.data if data is None else data
        return Response({"success": True, "data": payload}, status=success_status)

    error_code = result.error_code or ErrorCode.INTERNAL_FAILURE
    http_status = ERROR_STATUS_CODES.get(
        error_code, status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    body = result.to_response()
    if error_code in GENERIC_MESSAGES:
        body["error"] = GENERIC_MESSAGES[error_code]
    return Response(body, status=http_status)


def invalid_request_response(errors: dict, message: str = "Invalid request") -> Response:
    """400 response for serializer errors, in the same shape as service failures."""
    return Response(
        {
            "success": False,
            "error": message,
            "error_code": ErrorCode.INVALID_REQUEST,
            "errors": errors,
        },
        status=status.HTTP_400_BAD_REQUEST,
    )


def health_check(request):
    """
    Health check endpoint for monitoring and orchestration.

    Returns:
        200 with {"status": "healthy", "database": ..., "cache": ...}
        503 when the database is unreachable. Cache problems degrade the
        report but not the status, since the cache ignores Redis errors.
    """
    health_status = {
        "status": "healthy",
        "database": "unknown",
        "cache": "unknown",
    }
    is_healthy = True

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        health_status["database"] = "connected"
    except Exception:
        logger.exception("Health check: database unreachable")
        health_status["database"] = "disconnected"
        health_status["status"] = "unhealthy"
        is_healthy = False

    try:
        cache.set("health_check", "ok", timeout=1)
        if cache.get("health_check") == "ok":
            health_status["cache"] = "connected"
        else:
            health_status["cache"] = "disconnected"
    except Exception:
        logger.warning("Health check: cache unreachable", exc_info=True)
        health_status["cache"] = "disconnected"

    return JsonResponse(health_status, status=200 if is_healthy else 503)
