"""
Paystack API adapter.

This module provides the PaystackAdapter class which encapsulates all
Paystack API interactions. Gateway calls go through this adapter so that
timeouts, error translation and logging are handled in one place.

Features:
- Configurable timeout on every HTTP call
- Error translation to domain exceptions
- Structured logging with timing metrics
- Inline mode when no secret key is configured: the browser opens the
  Paystack popup with the public key and reports back to the callback view

Configuration (via settings):
- PAYSTACK_PUBLIC_KEY: Public key handed to the browser
- PAYSTACK_SECRET_KEY: Secret key for server-side calls (optional)
- PAYSTACK_BASE_URL: API root (default: https://api.paystack.co)
- PAYSTACK_API_TIMEOUT_SECONDS: HTTP timeout (default: 10)
- PAYMENTS_REFERENCE_PREFIX: Prefix for generated references

Usage:
    from payments.adapters import PaystackAdapter, ReferenceGenerator

    request = GatewayRequest(
        reference=ReferenceGenerator.generate(),
        email=member.email,
        amount=fee_item.amount_in_minor_units(),
        public_key=settings.PAYSTACK_PUBLIC_KEY,
    )
    session = PaystackAdapter.initiate(request, on_success, on_cancel)
    result = PaystackAdapter.verify_transaction(request.reference)
"""

from __future__ import annotations

import logging
import secrets
import time
from typing import TYPE_CHECKING

import requests
from django.conf import settings

from payments.adapters.types import GatewayRequest, GatewayResult, GatewaySession
from payments.exceptions import GatewayError, GatewayUnavailableError

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any


DEFAULT_BASE_URL = "https://api.paystack.co"
DEFAULT_REFERENCE_PREFIX = "DUES"


# =============================================================================
# Reference Generation
# =============================================================================


class ReferenceGenerator:
    """
    Generates transaction references.

    References come from the operating system's CSPRNG, so two attempts
    started in the same millisecond still get different references.

    Format: {prefix}-{24 hex chars}

    Example:
        ReferenceGenerator.generate()
        # Result: "DUES-9f2c4e1ab07d53c86e0f1a2b"
    """

    @staticmethod
    def generate(prefix: str | None = None) -> str:
        if prefix is None:
            prefix = getattr(settings, "PAYMENTS_REFERENCE_PREFIX", DEFAULT_REFERENCE_PREFIX)
        token = secrets.token_hex(12)
        return f"{prefix}-{token}" if prefix else token


# =============================================================================
# Paystack Adapter
# =============================================================================


class PaystackAdapter:
    """
    Adapter for Paystack API operations.

    All methods are class methods - no instance state is maintained,
    so the class itself can be passed wherever a PaymentGateway is expected.
    """

    # =========================================================================
    # Configuration
    # =========================================================================

    @staticmethod
    def _base_url() -> str:
        return getattr(settings, "PAYSTACK_BASE_URL", DEFAULT_BASE_URL).rstrip("/")

    @staticmethod
    def _timeout() -> float:
        return getattr(settings, "PAYSTACK_API_TIMEOUT_SECONDS", 10)

    @staticmethod
    def _headers() -> dict[str, str]:
        return {
            "Authorization": f"Bearer {settings.PAYSTACK_SECRET_KEY}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def has_secret_key() -> bool:
        return bool(getattr(settings, "PAYSTACK_SECRET_KEY", ""))

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get logger for this adapter."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    # =========================================================================
    # Core Operations
    # =========================================================================

    @classmethod
    def initiate(
        cls,
        request: GatewayRequest,
        on_success: Callable[[GatewayResult], Any] | None = None,
        on_cancel: Callable[[], Any] | None = None,
    ) -> GatewaySession:
        """
        Open a checkout for the request.

        With a secret key configured, the transaction is initialized
        server-side and the session carries Paystack's authorization URL.
        Without one, an inline session is returned and the browser drives
        the popup itself.

        Raises:
            GatewayError: Paystack rejected the request
            GatewayUnavailableError: Paystack could not be reached
        """
        if not cls.has_secret_key():
            cls.get_logger().info(
                "Opening inline Paystack session",
                extra={"reference": request.reference, "amount": request.amount},
            )
            return GatewaySession(request, on_success=on_success, on_cancel=on_cancel)

        data = cls._call(
            "POST",
            "/transaction/initialize",
            operation="initialize_transaction",
            log_context={"reference": request.reference, "amount": request.amount},
            json=request.to_payload(),
        )
        return GatewaySession(
            request,
            on_success=on_success,
            on_cancel=on_cancel,
            authorization_url=data.get("authorization_url", ""),
            access_code=data.get("access_code", ""),
        )

    @classmethod
    def verify_transaction(cls, reference: str) -> GatewayResult:
        """
        Ask Paystack for the final state of a transaction.

        Raises:
            GatewayError: Paystack rejected the request or key is missing
            GatewayUnavailableError: Paystack could not be reached
        """
        if not cls.has_secret_key():
            raise GatewayError(
                "Cannot verify transactions without PAYSTACK_SECRET_KEY",
                error_code="GATEWAY_NOT_CONFIGURED",
            )

        data = cls._call(
            "GET",
            f"/transaction/verify/{reference}",
            operation="verify_transaction",
            log_context={"reference": reference},
        )
        return GatewayResult.from_payload(data)

    # =========================================================================
    # HTTP
    # =========================================================================

    @classmethod
    def _call(
        cls,
        method: str,
        path: str,
        operation: str,
        log_context: dict[str, Any],
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Send one request and return the ``data`` object of the response."""
        logger = cls.get_logger()
        log_context = {"operation": operation, **log_context}

        start_time = time.time()
        logger.info("Starting Paystack operation", extra=log_context)

        try:
            response = requests.request(
                method,
                f"{cls._base_url()}{path}",
                headers=cls._headers(),
                timeout=cls._timeout(),
                **kwargs,
            )
        except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                "Paystack unreachable",
                extra={**log_context, "duration_ms": duration_ms, "error": str(e)},
            )
            raise GatewayUnavailableError("Payment gateway is unavailable") from e
        except requests.exceptions.RequestException as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                "Paystack request failed",
                extra={**log_context, "duration_ms": duration_ms, "error": str(e)},
            )
            raise GatewayError("Payment gateway request failed") from e

        duration_ms = (time.time() - start_time) * 1000

        try:
            body = response.json()
        except ValueError:
            body = {}

        if not response.ok or not body.get("status"):
            message = body.get("message") or response.reason or "Unknown error"
            logger.warning(
                "Paystack rejected request",
                extra={
                    **log_context,
                    "status_code": response.status_code,
                    "gateway_message": message,
                    "duration_ms": duration_ms,
                },
            )
            if response.status_code >= 500:
                raise GatewayUnavailableError(
                    "Payment gateway is unavailable", gateway_message=message
                )
            raise GatewayError("Payment gateway rejected the request", gateway_message=message)

        logger.info(
            "Paystack operation completed",
            extra={**log_context, "status_code": response.status_code, "duration_ms": duration_ms},
        )
        return body.get("data") or {}
