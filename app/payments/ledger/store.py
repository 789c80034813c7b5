"""
Ledger store adapter.

The reconciliation engine talks to storage only through the LedgerStore
protocol: append one record, read a member's records, and two lookups used
for idempotency. DjangoLedgerStore implements it over the ORM.

Conditional append:
    The "at most one success per (member, fee item)" rule is enforced by a
    partial unique index on TransactionRecord. append() runs the insert in
    its own atomic block and turns the resulting IntegrityError into
    DuplicateSuccessRecord, so two concurrent checkouts for the same item
    can never both be recorded.

Ordering:
    query_by_member() makes no ordering promise. Callers sort.

Usage:
    from payments.ledger import DjangoLedgerStore

    store = DjangoLedgerStore()
    record_id = store.append(record)
    records = store.query_by_member(member.id)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from django.db import DatabaseError, IntegrityError, transaction

from payments.ledger.exceptions import (
    DuplicateReference,
    DuplicateSuccessRecord,
    LedgerReadError,
    LedgerWriteError,
)
from payments.models import TransactionRecord, TransactionStatus

if TYPE_CHECKING:
    import uuid

logger = logging.getLogger(__name__)


@runtime_checkable
class LedgerStore(Protocol):
    """Storage operations the payment core depends on."""

    def append(self, record: TransactionRecord) -> uuid.UUID:
        """Persist a new record and return its id."""
        ...

    def query_by_member(self, member_id: uuid.UUID) -> list[TransactionRecord]:
        """All records for a member, in no particular order."""
        ...

    def get_by_reference(self, reference: str) -> TransactionRecord | None:
        ...

    def find_success(self, member_id: uuid.UUID, fee_item_id: str) -> TransactionRecord | None:
        ...


class DjangoLedgerStore:
    """
    LedgerStore backed by the Django ORM.

    Stateless; one instance can be shared between threads.
    """

    def append(self, record: TransactionRecord) -> uuid.UUID:
        """
        Insert a record.

        Returns:
            The id of the stored row

        Raises:
            DuplicateReference: The gateway reference is already stored
            DuplicateSuccessRecord: The member already has a success row for this item
            LedgerWriteError: Any other storage failure
        """
        log_context = {
            "reference": record.gateway_reference,
            "member_id": str(record.member_id),
            "fee_item_id": record.fee_item_id,
        }

        try:
            with transaction.atomic():
                record.save()
        except IntegrityError as e:
            self._raise_for_conflict(record, e, log_context)
        except DatabaseError as e:
            logger.error("Ledger append failed", extra={**log_context, "error": str(e)})
            raise LedgerWriteError(
                "Could not store transaction record",
                details={"reference": record.gateway_reference},
            ) from e

        if record.pk is None or record._state.adding:
            raise LedgerWriteError(
                "Store did not confirm the transaction record",
                details={"reference": record.gateway_reference},
            )

        logger.info("Ledger entry appended", extra={**log_context, "record_id": str(record.pk)})
        return record.pk

    def query_by_member(self, member_id: uuid.UUID) -> list[TransactionRecord]:
        """
        Raises:
            LedgerReadError: If the query fails
        """
        try:
            return list(TransactionRecord.objects.filter(member_id=member_id))
        except DatabaseError as e:
            logger.error(
                "Ledger query failed",
                extra={"member_id": str(member_id), "error": str(e)},
            )
            raise LedgerReadError(
                "Could not load transactions",
                details={"member_id": str(member_id)},
            ) from e

    def get_by_reference(self, reference: str) -> TransactionRecord | None:
        try:
            return TransactionRecord.objects.filter(gateway_reference=reference).first()
        except DatabaseError as e:
            raise LedgerReadError(
                "Could not load transaction",
                details={"reference": reference},
            ) from e

    def find_success(self, member_id: uuid.UUID, fee_item_id: str) -> TransactionRecord | None:
        try:
            return TransactionRecord.objects.filter(
                member_id=member_id,
                fee_item_id=fee_item_id,
                status=TransactionStatus.SUCCESS,
            ).first()
        except DatabaseError as e:
            raise LedgerReadError(
                "Could not load transactions",
                details={"member_id": str(member_id), "fee_item_id": fee_item_id},
            ) from e

    def _raise_for_conflict(self, record, error, log_context) -> None:
        # The insert's savepoint is rolled back, so reads are safe here
        if self.get_by_reference(record.gateway_reference) is not None:
            logger.info("Gateway reference already recorded", extra=log_context)
            raise DuplicateReference(
                f"Reference {record.gateway_reference} already recorded",
                details={"reference": record.gateway_reference},
            ) from error

        if record.status == TransactionStatus.SUCCESS:
            existing = self.find_success(record.member_id, record.fee_item_id)
            if existing is not None:
                logger.warning(
                    "Fee item already paid",
                    extra={**log_context, "existing_reference": existing.gateway_reference},
                )
                raise DuplicateSuccessRecord(
                    f"Fee item {record.fee_item_id} already paid",
                    existing_reference=existing.gateway_reference,
                    details={"reference": record.gateway_reference},
                ) from error

        logger.error("Ledger append rejected", extra={**log_context, "error": str(error)})
        raise LedgerWriteError(
            "Could not store transaction record",
            details={"reference": record.gateway_reference},
        ) from error
