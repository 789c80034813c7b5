"""
Fee catalog: the canonical list of payable items.

The catalog is configuration, not data. It is read from
``settings.PAYMENTS_FEE_CATALOG`` once per process, validated, and frozen.
Nothing in the running system can add, remove or edit a fee item.

Each item has a stable ``id`` that ledger entries reference. The ``name``
is presentational only, so renaming an item does not detach the payments
already recorded against it.

Settings format:
    PAYMENTS_FEE_CATALOG = [
        {
            "id": "departmental-fee",
            "name": "Departmental Fee",
            "amount": 2500,              # whole currency units (naira)
            "description": "Annual departmental dues",
            "deadline": "2025-03-31",
            "required": True,
        },
    ]

Usage:
    from payments.catalog import get_fee_catalog

    catalog = get_fee_catalog()
    for item in catalog.list():
        print(item.name, item.amount)

    fee = catalog.get("departmental-fee")
    fee.amount_in_minor_units()  # 250000 kobo
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils import timezone

from payments.exceptions import FeeItemNotFound

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping
    from typing import Any


DEFAULT_DEADLINE_WARNING_DAYS = 14


@dataclass(frozen=True)
class FeeItem:
    """
    One payable item.

    Attributes:
        id: Stable key stored on every ledger entry for this item
        name: Display name, unique within the catalog
        amount: Price in whole currency units, always positive
        description: Short explanation shown to members
        deadline: Last day to pay
        required: Whether every member must pay it
    """

    id: str
    name: str
    amount: int
    description: str
    deadline: datetime.date
    required: bool = True

    def amount_in_minor_units(self, factor: int | None = None) -> int:
        """Amount in the gateway's smallest unit (kobo for NGN)."""
        if factor is None:
            factor = getattr(settings, "PAYMENTS_MINOR_UNIT_FACTOR", 100)
        return self.amount * factor

    def days_until_deadline(self, today: datetime.date | None = None) -> int:
        """Days left before the deadline; negative once it has passed."""
        today = today or timezone.localdate()
        return (self.deadline - today).days

    def is_deadline_approaching(
        self,
        today: datetime.date | None = None,
        window_days: int | None = None,
    ) -> bool:
        """True inside the warning window, up to and including the deadline day."""
        if window_days is None:
            window_days = getattr(
                settings, "PAYMENTS_DEADLINE_WARNING_DAYS", DEFAULT_DEADLINE_WARNING_DAYS
            )
        days = self.days_until_deadline(today)
        return 0 <= days <= window_days


class FeeCatalog:
    """
    Immutable, ordered collection of FeeItems.

    Listing is stable and can be repeated any number of times with the same
    result. Construction validates the whole catalog and raises
    ImproperlyConfigured on the first problem found.
    """

    def __init__(self, items: Iterable[FeeItem]):
        self._items = tuple(items)
        self._validate()
        self._by_id = {item.id: item for item in self._items}

    @classmethod
    def from_settings(cls, entries: Iterable[Mapping[str, Any]] | None = None) -> FeeCatalog:
        """Build a catalog from settings-style dicts."""
        if entries is None:
            entries = getattr(settings, "PAYMENTS_FEE_CATALOG", [])
        return cls(_parse_entry(entry, position) for position, entry in enumerate(entries))

    def list(self) -> tuple[FeeItem, ...]:
        return self._items

    def get(self, fee_item_id: str) -> FeeItem:
        """
        Look up an item by id.

        Raises:
            FeeItemNotFound: If no item has this id
        """
        try:
            return self._by_id[fee_item_id]
        except KeyError:
            raise FeeItemNotFound(
                f"Fee item {fee_item_id!r} not found",
                details={"fee_item_id": fee_item_id},
            ) from None

    def __iter__(self) -> Iterator[FeeItem]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, fee_item_id: object) -> bool:
        return fee_item_id in self._by_id

    def _validate(self) -> None:
        seen_ids: set[str] = set()
        seen_names: set[str] = set()
        for item in self._items:
            if item.id in seen_ids:
                raise ImproperlyConfigured(f"Duplicate fee item id {item.id!r}")
            if item.name in seen_names:
                raise ImproperlyConfigured(f"Duplicate fee item name {item.name!r}")
            # bool is an int subclass
            if isinstance(item.amount, bool) or not isinstance(item.amount, int) or item.amount <= 0:
                raise ImproperlyConfigured(
                    f"Fee item {item.id!r} must have a positive integer amount, got {item.amount!r}"
                )
            seen_ids.add(item.id)
            seen_names.add(item.name)


def _parse_entry(entry: Mapping[str, Any], position: int) -> FeeItem:
    missing = [key for key in ("id", "name", "amount", "deadline") if not entry.get(key)]
    if missing:
        raise ImproperlyConfigured(
            f"PAYMENTS_FEE_CATALOG[{position}] is missing {', '.join(missing)}"
        )

    deadline = entry["deadline"]
    if not isinstance(deadline, datetime.date):
        try:
            deadline = datetime.date.fromisoformat(str(deadline))
        except ValueError:
            raise ImproperlyConfigured(
                f"PAYMENTS_FEE_CATALOG[{position}] deadline {deadline!r} is not an ISO date"
            ) from None

    return FeeItem(
        id=str(entry["id"]),
        name=str(entry["name"]),
        amount=entry["amount"],
        description=str(entry.get("description", "")),
        deadline=deadline,
        required=bool(entry.get("required", True)),
    )


@lru_cache(maxsize=1)
def get_fee_catalog() -> FeeCatalog:
    """Process-wide catalog, built from settings on first use."""
    return FeeCatalog.from_settings()


def reset_fee_catalog_cache() -> None:
    """Forget the cached catalog so the next call re-reads settings."""
    get_fee_catalog.cache_clear()
