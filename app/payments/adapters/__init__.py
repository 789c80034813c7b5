"""
Payment gateway adapters.

All payment gateway calls go through these adapters to ensure consistent
error handling, timeouts and observability.

Usage:
    from payments.adapters import GatewayRequest, PaystackAdapter

    session = PaystackAdapter.initiate(request, on_success, on_cancel)
"""

from payments.adapters.paystack_adapter import PaystackAdapter, ReferenceGenerator
from payments.adapters.types import (
    GatewayRequest,
    GatewayResult,
    GatewaySession,
    PaymentGateway,
    SessionOutcome,
)

__all__ = [
    "GatewayRequest",
    "GatewayResult",
    "GatewaySession",
    "PaymentGateway",
    "PaystackAdapter",
    "ReferenceGenerator",
    "SessionOutcome",
]
