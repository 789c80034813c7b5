"""
Dashboard read model.

One call, one ledger read. Everything the member's dashboard shows is
derived from that read plus the fee catalog:

    {
        total_paid, completed_payments, pending_payments,
        transactions (newest first), payment_options, error
    }

A failed read does not raise. The dashboard comes back with no
transactions and an error message for the UI to display.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from django.utils import timezone

from core.services import BaseService
from payments.catalog import get_fee_catalog
from payments.ledger import DjangoLedgerStore, LedgerReadError
from payments.services.projection import StatusProjector

if TYPE_CHECKING:
    from members.models import Member
    from payments.catalog import FeeCatalog, FeeItem
    from payments.ledger import LedgerStore
    from payments.models import TransactionRecord


LOAD_ERROR_MESSAGE = "We could not load your transaction history. Please refresh to try again."


@dataclass(frozen=True)
class PaymentOption:
    fee_item: FeeItem
    is_paid: bool
    days_to_deadline: int
    deadline_approaching: bool


@dataclass
class Dashboard:
    total_paid: int
    completed_payments: list[FeeItem]
    pending_payments: list[FeeItem]
    transactions: list[TransactionRecord]
    payment_options: list[PaymentOption] = field(default_factory=list)
    error: str | None = None


class DashboardService(BaseService):
    """Builds the member dashboard from the ledger and the catalog."""

    @classmethod
    def get_dashboard(
        cls,
        member: Member,
        store: LedgerStore | None = None,
        catalog: FeeCatalog | None = None,
        today: datetime.date | None = None,
    ) -> Dashboard:
        store = store or DjangoLedgerStore()
        catalog = catalog or get_fee_catalog()
        today = today or timezone.localdate()

        error = None
        try:
            records = store.query_by_member(member.pk)
        except LedgerReadError as e:
            cls.get_logger().error(
                "Dashboard transaction load failed",
                extra={"member_id": str(member.pk), "error": str(e)},
            )
            records = []
            error = LOAD_ERROR_MESSAGE

        transactions = sorted(records, key=lambda record: record.created_at, reverse=True)
        status = StatusProjector.project(catalog.list(), transactions)

        options = [
            PaymentOption(
                fee_item=item,
                is_paid=status.is_paid(item.id),
                days_to_deadline=item.days_until_deadline(today),
                deadline_approaching=item.is_deadline_approaching(today),
            )
            for item in catalog.list()
        ]

        return Dashboard(
            total_paid=status.total_paid,
            completed_payments=list(status.completed_items),
            pending_payments=list(status.pending_items),
            transactions=transactions,
            payment_options=options,
            error=error,
        )
