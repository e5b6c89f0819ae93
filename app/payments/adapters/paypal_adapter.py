"""
PayPal API adapter.

This module provides the PayPalAdapter class which encapsulates all PayPal
interactions: the Orders v2 REST API used by checkout, and the IPN
verification postback used by reconciliation. All PayPal calls should go
through this adapter to ensure consistent error handling, timeouts and
observability.

Features:
- Timeouts on every HTTP call
- Automatic error translation to domain exceptions
- Structured logging with timing metrics
- OAuth access token cached in the Django cache until shortly before expiry

Configuration (via settings):
- PAYPAL_MODE: "live" or "sandbox"
- PAYPAL_CLIENT_ID / PAYPAL_CLIENT_SECRET: REST API credentials
- PAYPAL_API_TIMEOUT_SECONDS: REST call timeout (default: 10)
- PAYPAL_IPN_TIMEOUT_SECONDS: IPN postback timeout (default: 10)

Usage:
    from payments.adapters import PayPalAdapter

    result = PayPalAdapter.create_order(Decimal("19.99"), "eur")
    # result.id -> PayPal order id for the JS SDK

    result = PayPalAdapter.capture_order(result.id)

    if PayPalAdapter.verify_notification(raw_body):
        ...
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import requests
from django.conf import settings
from django.core.cache import cache

from payments.exceptions import (
    PayPalAPIUnavailableError,
    PayPalAuthenticationError,
    PayPalError,
    PayPalInvalidRequestError,
    PayPalTimeoutError,
)


# =============================================================================
# Data Types
# =============================================================================


@dataclass
class CheckoutOrderResult:
    """
    Result from PayPal order creation.

    Attributes:
        id: PayPal order id
        status: PayPal order status (CREATED, ...)
        raw_response: Full PayPal response dict (for debugging)
    """

    id: str
    status: str
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class CaptureResult:
    """
    Result from PayPal order capture.

    Attributes:
        id: PayPal order id
        status: Order status after capture (COMPLETED, ...)
        raw_response: Full PayPal response dict
    """

    id: str
    status: str
    raw_response: dict[str, Any] = field(default_factory=dict)


def format_amount(amount: Decimal) -> str:
    """Amount with exactly two decimals, as PayPal expects."""
    return str(amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


# =============================================================================
# PayPal Adapter
# =============================================================================


class PayPalAdapter:
    """
    Adapter for PayPal operations.

    All methods are class methods - no instance state is maintained.
    Thread-safe for use from Celery workers.
    """

    API_BASE_URLS = {
        "live": "https://api-m.paypal.com",
        "sandbox": "https://api-m.sandbox.paypal.com",
    }
    IPN_URLS = {
        "live": "https://ipnpb.paypal.com/cgi-bin/webscr",
        "sandbox": "https://ipnpb.sandbox.paypal.com/cgi-bin/webscr",
    }

    TOKEN_CACHE_KEY = "paypal:access_token:{mode}"
    # Refresh this many seconds before PayPal's stated expiry
    TOKEN_EXPIRY_MARGIN_SECONDS = 60

    # =========================================================================
    # Configuration
    # =========================================================================

    @staticmethod
    def mode() -> str:
        return "live" if settings.PAYPAL_MODE == "live" else "sandbox"

    @classmethod
    def api_base_url(cls) -> str:
        return cls.API_BASE_URLS[cls.mode()]

    @classmethod
    def ipn_url(cls) -> str:
        return cls.IPN_URLS[cls.mode()]

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get logger for this adapter."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    # =========================================================================
    # Authentication
    # =========================================================================

    @classmethod
    def get_access_token(cls) -> str:
        """
        OAuth2 client-credentials token, from cache when still valid.

        Raises:
            PayPalAuthenticationError: Client id/secret rejected
            PayPalAPIUnavailableError / PayPalTimeoutError: Transport failure
        """
        cache_key = cls.TOKEN_CACHE_KEY.format(mode=cls.mode())
        token = cache.get(cache_key)
        if token:
            return token

        log_context = {"operation": "get_access_token", "mode": cls.mode()}
        start_time = time.time()

        try:
            response = requests.post(
                f"{cls.api_base_url()}/v1/oauth2/token",
                auth=(settings.PAYPAL_CLIENT_ID, settings.PAYPAL_CLIENT_SECRET),
                data={"grant_type": "client_credentials"},
                headers={"Accept": "application/json"},
                timeout=settings.PAYPAL_API_TIMEOUT_SECONDS,
            )
            response.raise_for_status()
            body = response.json()
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            cls._handle_error(e, log_context, duration_ms)
            raise

        token = body["access_token"]
        expires_in = int(body.get("expires_in", 0))
        cache.set(
            cache_key,
            token,
            timeout=max(expires_in - cls.TOKEN_EXPIRY_MARGIN_SECONDS, 1),
        )
        return token

    @classmethod
    def _api_call(
        cls,
        method: str,
        path: str,
        log_context: dict[str, Any],
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Authenticated REST call returning the decoded JSON body."""
        logger = cls.get_logger()
        start_time = time.time()
        logger.info("Starting PayPal operation", extra=log_context)

        try:
            response = requests.request(
                method,
                f"{cls.api_base_url()}{path}",
                json=payload,
                headers={
                    "Authorization": f"Bearer {cls.get_access_token()}",
                    "Content-Type": "application/json",
                    "Prefer": "return=representation",
                },
                timeout=settings.PAYPAL_API_TIMEOUT_SECONDS,
            )
            response.raise_for_status()
            body = response.json()
        except PayPalError:
            raise
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            cls._handle_error(e, log_context, duration_ms)
            raise

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "PayPal operation completed",
            extra={**log_context, "status": body.get("status"), "duration_ms": duration_ms},
        )
        return body

    # =========================================================================
    # Checkout
    # =========================================================================

    @classmethod
    def create_order(cls, amount: Decimal, currency: str = "EUR") -> CheckoutOrderResult:
        """
        Create a PayPal order with intent CAPTURE.

        Args:
            amount: Positive amount, sent with two decimals
            currency: ISO 4217 code, upper-cased before sending

        Returns:
            CheckoutOrderResult with the PayPal order id

        Raises:
            PayPalInvalidRequestError: PayPal rejected the order
            PayPalAPIUnavailableError: PayPal unavailable
            PayPalTimeoutError: Request timed out
        """
        currency = (currency or "EUR").upper()
        value = format_amount(amount)
        log_context = {"operation": "create_order", "amount": value, "currency": currency}

        body = cls._api_call(
            "POST",
            "/v2/checkout/orders",
            log_context,
            payload={
                "intent": "CAPTURE",
                "purchase_units": [
                    {"amount": {"currency_code": currency, "value": value}},
                ],
            },
        )
        return CheckoutOrderResult(
            id=body["id"],
            status=body.get("status", ""),
            raw_response=body,
        )

    @classmethod
    def capture_order(cls, provider_order_id: str) -> CaptureResult:
        """
        Capture an approved PayPal order.

        Raises:
            PayPalInvalidRequestError: Order unknown or not capturable
            PayPalAPIUnavailableError: PayPal unavailable
            PayPalTimeoutError: Request timed out
        """
        log_context = {"operation": "capture_order", "provider_order_id": provider_order_id}
        body = cls._api_call(
            "POST",
            f"/v2/checkout/orders/{provider_order_id}/capture",
            log_context,
            payload={},
        )
        return CaptureResult(
            id=body.get("id", provider_order_id),
            status=body.get("status", ""),
            raw_response=body,
        )

    # =========================================================================
    # IPN Verification
    # =========================================================================

    @classmethod
    def verify_notification(cls, raw_body: str) -> bool:
        """
        Ask PayPal whether an IPN body is genuine.

        The body is posted back unchanged, prefixed with cmd=_notify-validate.
        Only the exact answer "VERIFIED" counts. Transport errors and
        timeouts return False; they are never raised.
        """
        logger = cls.get_logger()
        log_context = {"operation": "verify_notification", "mode": cls.mode()}
        start_time = time.time()

        try:
            response = requests.post(
                cls.ipn_url(),
                data=f"cmd=_notify-validate&{raw_body}".encode("latin-1"),
                headers={
                    "Content-Type": "application/x-www-form-urlencoded",
                    "User-Agent": "credential-dispenser-ipn-verifier",
                },
                timeout=settings.PAYPAL_IPN_TIMEOUT_SECONDS,
            )
        except requests.RequestException as e:
            logger.warning(
                f"IPN verification request failed: {type(e).__name__}",
                extra={**log_context, "duration_ms": (time.time() - start_time) * 1000},
            )
            return False

        verified = response.status_code == 200 and response.text == "VERIFIED"
        logger.info(
            "IPN verification answered",
            extra={
                **log_context,
                "http_status": response.status_code,
                "verified": verified,
                "duration_ms": (time.time() - start_time) * 1000,
            },
        )
        return verified

    # =========================================================================
    # Error Handling
    # =========================================================================

    @classmethod
    def _handle_error(
        cls,
        error: Exception,
        log_context: dict[str, Any],
        duration_ms: float,
    ) -> None:
        """
        Translate requests exceptions to domain exceptions.

        Raises:
            PayPalTimeoutError: Request timed out
            PayPalAPIUnavailableError: Connection error, 5xx or unexpected failure
            PayPalAuthenticationError: 401 from PayPal
            PayPalInvalidRequestError: Any other 4xx
        """
        logger = cls.get_logger()
        log_context = {**log_context, "duration_ms": duration_ms}

        if isinstance(error, requests.Timeout):
            logger.error("PayPal request timed out", extra=log_context)
            raise PayPalTimeoutError("PayPal did not respond in time. Please retry.")

        if isinstance(error, requests.ConnectionError):
            logger.error("Connection error to PayPal", extra=log_context, exc_info=True)
            raise PayPalAPIUnavailableError(
                "Could not connect to PayPal. Please retry.",
                paypal_code="connection_error",
            )

        if isinstance(error, requests.HTTPError) and error.response is not None:
            status_code = error.response.status_code
            paypal_code = cls._paypal_error_name(error.response)

            if status_code == 401:
                cache.delete(cls.TOKEN_CACHE_KEY.format(mode=cls.mode()))
                logger.critical(
                    "PayPal authentication failed - check client credentials",
                    extra=log_context,
                )
                raise PayPalAuthenticationError(
                    "PayPal authentication failed",
                    paypal_code=paypal_code,
                    status_code=status_code,
                )

            if status_code >= 500:
                logger.error(
                    "PayPal API error",
                    extra={**log_context, "http_status": status_code},
                )
                raise PayPalAPIUnavailableError(
                    "PayPal service error. Please retry.",
                    paypal_code=paypal_code,
                    status_code=status_code,
                )

            logger.error(
                "Invalid request to PayPal",
                extra={**log_context, "http_status": status_code, "paypal_code": paypal_code},
            )
            raise PayPalInvalidRequestError(
                f"PayPal rejected the request ({paypal_code or status_code})",
                paypal_code=paypal_code,
                status_code=status_code,
            )

        logger.error(
            f"Unexpected error from PayPal: {type(error).__name__}",
            extra=log_context,
            exc_info=True,
        )
        raise PayPalAPIUnavailableError(
            f"Unexpected PayPal error: {error}",
            paypal_code="unknown_error",
        )

    @staticmethod
    def _paypal_error_name(response: requests.Response) -> str | None:
        """PayPal's error name from an error body ("name" or OAuth "error")."""
        try:
            body = response.json()
        except ValueError:
            return None
        if not isinstance(body, dict):
            return None
        return body.get("name") or body.get("error")
