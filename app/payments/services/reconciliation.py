"""
Reconciliation: turning a gateway success into exactly one ledger entry.

This is where money that has already moved at the gateway gets its record.
The policy is "fail loud, keep the reference": any storage problem becomes
a RecordingError that carries the gateway reference and a support
instruction. Nothing is retried and nothing is reversed, because retrying
a charge risks billing the member twice.

Guarantees:
    - The stored amount is the catalog amount. The gateway's amount is
      only compared and logged.
    - Replaying the same gateway reference returns the stored record.
    - A second, different success for a paid (member, fee item) is refused
      by the store and reported as DuplicatePaymentError.

Usage:
    from payments.services import ReconciliationService

    try:
        record = ReconciliationService.record_success(member, fee_item, result)
    except RecordingError as e:
        show_support_message(e.reference)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.utils import timezone

from core.services import BaseService
from payments.exceptions import (
    DuplicatePaymentError,
    PaymentValidationError,
    RecordingError,
)
from payments.ledger import (
    DjangoLedgerStore,
    DuplicateReference,
    DuplicateSuccessRecord,
    LedgerError,
)
from payments.models import TransactionRecord, TransactionStatus

if TYPE_CHECKING:
    from members.models import Member
    from payments.adapters import GatewayResult
    from payments.catalog import FeeItem
    from payments.ledger import LedgerStore


class ReconciliationService(BaseService):
    """Records successful gateway payments in the ledger."""

    @classmethod
    def record_success(
        cls,
        member: Member | None,
        fee_item: FeeItem | None,
        gateway_result: GatewayResult | None,
        store: LedgerStore | None = None,
    ) -> TransactionRecord:
        """
        Record one successful payment.

        Args:
            member: Member who paid
            fee_item: Catalog item paid for
            gateway_result: Gateway outcome; must carry a reference
            store: Ledger store (defaults to the ORM store)

        Returns:
            The stored TransactionRecord (the existing one on replay)

        Raises:
            PaymentValidationError: Missing member, fee item or reference,
                or a result that is not a success
            DuplicatePaymentError: Member already has a success record for
                this fee item under another reference
            RecordingError: The ledger could not store the record
        """
        logger = cls.get_logger()
        store = store or DjangoLedgerStore()

        cls._check_preconditions(member, fee_item, gateway_result)
        reference = gateway_result.reference

        log_context = {
            "reference": reference,
            "member_id": str(member.pk),
            "fee_item_id": fee_item.id,
        }

        existing = cls._lookup(store, reference, log_context)
        if existing is not None:
            return cls._replayed(existing, member, fee_item, log_context)

        expected_minor = fee_item.amount_in_minor_units()
        if gateway_result.amount is not None and gateway_result.amount != expected_minor:
            logger.warning(
                "Gateway amount differs from catalog amount; storing catalog amount",
                extra={
                    **log_context,
                    "gateway_amount": gateway_result.amount,
                    "expected_amount": expected_minor,
                },
            )

        record = TransactionRecord(
            member=member,
            fee_item_id=fee_item.id,
            payment_type=fee_item.name,
            amount=fee_item.amount,
            gateway_reference=reference,
            status=TransactionStatus.SUCCESS,
            member_name=member.display_name,
            matric_number=member.matric_number or "",
            level=member.level or "",
            created_at=timezone.now(),
        )

        try:
            record_id = store.append(record)
        except DuplicateReference:
            # Lost a race with a replay of the same callback
            existing = cls._lookup(store, reference, log_context)
            if existing is None:
                raise RecordingError(reference) from None
            return cls._replayed(existing, member, fee_item, log_context)
        except DuplicateSuccessRecord as e:
            logger.error(
                "Second successful payment for an already-paid fee item",
                extra={**log_context, "existing_reference": e.existing_reference},
            )
            raise DuplicatePaymentError(
                reference,
                f"{fee_item.name} was already paid; this payment needs a manual refund",
                details={"existing_reference": e.existing_reference},
            ) from e
        except LedgerError as e:
            logger.error("Payment not recorded", extra={**log_context, "error": str(e)})
            raise RecordingError(reference) from e
        except Exception as e:
            # Money has moved; any failure here must surface the reference
            logger.exception("Payment not recorded", extra=log_context)
            raise RecordingError(reference) from e

        if not record_id:
            logger.error("Ledger store returned no record id", extra=log_context)
            raise RecordingError(reference)

        logger.info(
            "Payment recorded",
            extra={**log_context, "record_id": str(record_id), "amount": record.amount},
        )
        return record

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _check_preconditions(member, fee_item, gateway_result) -> None:
        if member is None:
            raise PaymentValidationError("Member is required", error_code="MEMBER_REQUIRED")
        if fee_item is None:
            raise PaymentValidationError("Fee item is required", error_code="FEE_ITEM_REQUIRED")
        if gateway_result is None or not (gateway_result.reference or "").strip():
            raise PaymentValidationError(
                "Gateway reference is required", error_code="REFERENCE_REQUIRED"
            )
        if not gateway_result.is_success:
            raise PaymentValidationError(
                "Only successful gateway results can be recorded",
                error_code="PAYMENT_NOT_SUCCESSFUL",
                details={"reference": gateway_result.reference, "status": gateway_result.status},
            )

    @classmethod
    def _lookup(cls, store, reference, log_context) -> TransactionRecord | None:
        try:
            return store.get_by_reference(reference)
        except Exception as e:
            cls.get_logger().error(
                "Could not check for an existing record",
                extra={**log_context, "error": str(e)},
            )
            raise RecordingError(reference) from e

    @classmethod
    def _replayed(cls, existing, member, fee_item, log_context) -> TransactionRecord:
        if existing.member_id != member.pk or existing.fee_item_id != fee_item.id:
            cls.get_logger().error(
                "Gateway reference already used for a different payment",
                extra={
                    **log_context,
                    "existing_member_id": str(existing.member_id),
                    "existing_fee_item_id": existing.fee_item_id,
                },
            )
            raise RecordingError(
                existing.gateway_reference,
                "This payment reference is already recorded against another payment",
                error_code="REFERENCE_CONFLICT",
            )
        cls.get_logger().info("Payment already recorded", extra=log_context)
        return existing
