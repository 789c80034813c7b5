"""
Status projection: paid/pending state derived from ledger entries.

StatusProjector.project() is a pure function of the catalog and a member's
records. It touches no storage and keeps no state, so calling it twice
with the same input gives the same DerivedStatus.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from payments.models import TransactionStatus

if TYPE_CHECKING:
    from collections.abc import Iterable

    from payments.catalog import FeeItem
    from payments.models import TransactionRecord


@dataclass(frozen=True)
class DerivedStatus:
    """
    A member's payment position. Never persisted.

    Attributes:
        total_paid: Sum of amounts over success records, whole currency units
        completed_items: Catalog items with a success record, in catalog order
        pending_items: Catalog items without one, in catalog order
    """

    total_paid: int
    completed_items: tuple[FeeItem, ...]
    pending_items: tuple[FeeItem, ...]

    def is_paid(self, fee_item_id: str) -> bool:
        return any(item.id == fee_item_id for item in self.completed_items)


class StatusProjector:
    """
    Derives DerivedStatus from fee items and ledger records.

    Records are matched to fee items by ``fee_item_id``. Records whose id
    is not in the catalog (a retired fee) still count toward total_paid.

    Usage:
        status = StatusProjector.project(catalog.list(), records)
        status.total_paid       # 6000
        status.pending_items    # (FeeItem(...),)
    """

    @staticmethod
    def project(
        fee_items: Iterable[FeeItem],
        records: Iterable[TransactionRecord],
    ) -> DerivedStatus:
        paid_ids: set[str] = set()
        seen_references: set[str] = set()
        total_paid = 0

        for record in records:
            if record.status != TransactionStatus.SUCCESS:
                continue
            # Same row listed twice must not be summed twice
            if record.gateway_reference in seen_references:
                continue
            seen_references.add(record.gateway_reference)
            paid_ids.add(record.fee_item_id)
            total_paid += record.amount

        completed = []
        pending = []
        for item in fee_items:
            (completed if item.id in paid_ids else pending).append(item)

        return DerivedStatus(
            total_paid=total_paid,
            completed_items=tuple(completed),
            pending_items=tuple(pending),
        )
