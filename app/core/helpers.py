"""
Request helpers shared by views.
"""

from __future__ import annotations

from django.http import HttpRequest


def get_client_ip(request: HttpRequest) -> str:
    """
    Extract the client IP from a request, honouring X-Forwarded-For.

    The first address in the forwarded chain is the original client.
    """
    x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
    if x_forwarded_for:
        return x_forwarded_for.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR", "")
