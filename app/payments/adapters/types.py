"""
Gateway-facing data types.

Types:
    GatewayRequest: Everything the gateway needs to open a checkout
    GatewayResult: What the gateway reports back for a reference
    GatewaySession: One open checkout and its two callbacks
    PaymentGateway: Protocol every gateway adapter satisfies

The callbacks on a GatewaySession fire at most once each and never both.
A session is the in-process handle; across HTTP requests the pending
registry plays the same role (see services/pending.py).
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any

logger = logging.getLogger(__name__)


# =============================================================================
# Request / Result
# =============================================================================


@dataclass(frozen=True)
class GatewayRequest:
    """
    Parameters for opening a gateway checkout.

    Attributes:
        reference: Fresh, unguessable reference for this attempt
        email: Payer's email
        amount: Amount in the gateway's minor unit (kobo)
        public_key: Deployment's public gateway key
        metadata: Fee item and member tags echoed back by the gateway
        currency: ISO 4217 code
        callback_url: Where the gateway sends the payer afterwards
    """

    reference: str
    email: str
    amount: int
    public_key: str
    metadata: dict[str, Any] = field(default_factory=dict)
    currency: str = "NGN"
    callback_url: str = ""

    def __post_init__(self) -> None:
        if not self.reference:
            raise ValueError("reference is required")
        if not self.email:
            raise ValueError("email is required")
        if self.amount <= 0:
            raise ValueError("amount must be positive")

    def to_payload(self) -> dict[str, Any]:
        """Body for the gateway's initialize call."""
        payload = {
            "reference": self.reference,
            "email": self.email,
            "amount": self.amount,
            "currency": self.currency,
            "metadata": self.metadata,
        }
        if self.callback_url:
            payload["callback_url"] = self.callback_url
        return payload


@dataclass(frozen=True)
class GatewayResult:
    """
    Outcome reported by the gateway for one reference.

    The amount is informational. The ledger always stores the catalog
    amount, never this one.

    Attributes:
        reference: Gateway reference
        status: Gateway status string ("success", "failed", "abandoned", ...)
        amount: Amount the gateway claims, in minor units, if reported
        currency: Currency reported by the gateway
        gateway_response: Human-readable gateway message
        paid_at: Gateway timestamp string, if reported
        raw: Full gateway payload for debugging
    """

    reference: str
    status: str = "success"
    amount: int | None = None
    currency: str | None = None
    gateway_response: str = ""
    paid_at: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return self.status == "success"

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> GatewayResult:
        """Build from a gateway transaction object or a client callback body."""
        amount = data.get("amount")
        return cls(
            reference=str(data.get("reference") or ""),
            status=str(data.get("status") or ""),
            amount=int(amount) if amount is not None else None,
            currency=data.get("currency"),
            gateway_response=data.get("gateway_response") or data.get("message") or "",
            paid_at=data.get("paid_at") or data.get("paidAt"),
            raw=dict(data),
        )


# =============================================================================
# Session
# =============================================================================


class SessionOutcome:
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    CANCELLED = "cancelled"


class GatewaySession:
    """
    One open checkout.

    resolve_success() and resolve_cancel() are safe to call from any thread.
    Whichever runs first wins; every later call is ignored and returns False.
    Callback exceptions propagate to the caller of the resolve method.

    Usage:
        session = GatewaySession(request, on_success=handle, on_cancel=reset)
        session.resolve_success(result)   # True, handle(result) ran
        session.resolve_cancel()          # False, already resolved
    """

    def __init__(
        self,
        request: GatewayRequest,
        on_success: Callable[[GatewayResult], Any] | None = None,
        on_cancel: Callable[[], Any] | None = None,
        authorization_url: str = "",
        access_code: str = "",
    ):
        self.request = request
        self.authorization_url = authorization_url
        self.access_code = access_code
        self._on_success = on_success
        self._on_cancel = on_cancel
        self._outcome = SessionOutcome.PENDING
        self._lock = threading.Lock()

    @property
    def reference(self) -> str:
        return self.request.reference

    @property
    def outcome(self) -> str:
        return self._outcome

    @property
    def is_resolved(self) -> bool:
        return self._outcome != SessionOutcome.PENDING

    @property
    def mode(self) -> str:
        """redirect when the gateway issued a checkout URL, inline otherwise."""
        return "redirect" if self.authorization_url else "inline"

    def resolve_success(self, result: GatewayResult) -> bool:
        if not self._claim(SessionOutcome.SUCCEEDED):
            return False
        if self._on_success is not None:
            self._on_success(result)
        return True

    def resolve_cancel(self) -> bool:
        if not self._claim(SessionOutcome.CANCELLED):
            return False
        if self._on_cancel is not None:
            self._on_cancel()
        return True

    def _claim(self, outcome: str) -> bool:
        with self._lock:
            if self._outcome != SessionOutcome.PENDING:
                logger.warning(
                    "Ignoring second gateway callback",
                    extra={
                        "reference": self.reference,
                        "outcome": self._outcome,
                        "attempted": outcome,
                    },
                )
                return False
            self._outcome = outcome
            return True

    def __repr__(self) -> str:
        return f"GatewaySession(reference={self.reference!r}, outcome={self._outcome!r})"


class PaymentGateway(Protocol):
    """Payment gateway collaborator."""

    def initiate(
        self,
        request: GatewayRequest,
        on_success: Callable[[GatewayResult], Any] | None = None,
        on_cancel: Callable[[], Any] | None = None,
    ) -> GatewaySession:
        ...
