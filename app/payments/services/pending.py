"""
Pending payment registry.

When checkout starts, the attempt is remembered under its reference until
the gateway reports back. The HTTP callback arrives in a different request
from the one that opened the checkout, so the attempt lives in the Django
cache (Redis in production) rather than in memory.

Each attempt can be claimed once. Entries expire after
PAYMENTS_PENDING_TTL_SECONDS, so a gateway that never calls back leaves
nothing behind.

Usage:
    registry = PendingPaymentRegistry()
    registry.register(PendingPayment(reference, member.id, fee_item.id, amount))

    pending = registry.claim(reference)   # PendingPayment
    registry.claim(reference)             # None, already claimed
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING

from django.conf import settings
from django.core.cache import cache

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_PENDING_TTL_SECONDS = 60 * 60
CACHE_KEY_PREFIX = "payments:pending:"


@dataclass(frozen=True)
class PendingPayment:
    """An opened checkout waiting for the gateway's answer."""

    reference: str
    member_id: str
    fee_item_id: str
    amount: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PendingPayment:
        return cls(
            reference=data["reference"],
            member_id=str(data["member_id"]),
            fee_item_id=data["fee_item_id"],
            amount=int(data["amount"]),
        )


class PendingPaymentRegistry:
    """Cache-backed store of open checkouts, keyed by gateway reference."""

    def __init__(self, cache_backend=None, ttl_seconds: int | None = None):
        self._cache = cache_backend or cache
        if ttl_seconds is None:
            ttl_seconds = getattr(
                settings, "PAYMENTS_PENDING_TTL_SECONDS", DEFAULT_PENDING_TTL_SECONDS
            )
        self._ttl = ttl_seconds

    @staticmethod
    def _key(reference: str) -> str:
        return f"{CACHE_KEY_PREFIX}{reference}"

    def register(self, pending: PendingPayment) -> None:
        """
        Remember an attempt.

        Raises:
            ValueError: If the reference is already registered
        """
        added = self._cache.add(self._key(pending.reference), pending.to_dict(), self._ttl)
        if not added:
            raise ValueError(f"Reference {pending.reference} is already pending")
        logger.debug(
            "Pending payment registered",
            extra={"reference": pending.reference, "ttl_seconds": self._ttl},
        )

    def peek(self, reference: str) -> PendingPayment | None:
        data = self._cache.get(self._key(reference))
        return PendingPayment.from_dict(data) if data else None

    def claim(self, reference: str) -> PendingPayment | None:
        """
        Take an attempt out of the registry.

        Returns None if the reference is unknown, expired, or was claimed by
        someone else first.
        """
        key = self._key(reference)
        data = self._cache.get(key)
        if not data:
            return None
        # delete() reports whether this caller removed the key
        if not self._cache.delete(key):
            return None
        return PendingPayment.from_dict(data)

    def discard(self, reference: str) -> None:
        self._cache.delete(self._key(reference))
