"""
Payment initiation: from a selected fee item to an open gateway checkout.

Flow:
    1. build_request() turns (member, fee item) into a GatewayRequest with
       a fresh random reference and the amount in minor units.
    2. start_checkout() registers the attempt as pending and hands the
       request to the gateway. The returned GatewaySession's callbacks
       route back into complete() / cancel().
    3. complete() / cancel() are also called directly by the HTTP
       callback view. Either way the pending attempt is claimed exactly
       once, so a success and a cancel for the same reference can never
       both take effect.

The "already paid" check in start_checkout() only saves the member a
wasted trip to the gateway. The guarantee against paying twice is the
ledger store's conditional append.

Usage:
    from payments.services import PaymentInitiationService

    session = PaymentInitiationService.start_checkout(member, fee_item)
    session.authorization_url   # redirect here, or open the inline popup

    # later, from the callback request
    record = PaymentInitiationService.complete(reference, gateway_result)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.contrib.auth import get_user_model

from core.services import BaseService, ServiceResult
from payments.adapters import GatewayRequest, PaystackAdapter, ReferenceGenerator
from payments.catalog import get_fee_catalog
from payments.exceptions import (
    AlreadyPaidError,
    DuplicatePaymentError,
    GatewayError,
    PaymentValidationError,
    RecordingError,
)
from payments.ledger import DjangoLedgerStore, LedgerReadError
from payments.services.pending import PendingPayment, PendingPaymentRegistry
from payments.services.reconciliation import ReconciliationService

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any

    from members.models import Member
    from payments.adapters import GatewayResult, GatewaySession, PaymentGateway
    from payments.catalog import FeeItem
    from payments.ledger import LedgerStore
    from payments.models import TransactionRecord


class PaymentInitiationService(BaseService):
    """Opens gateway checkouts and routes their outcome."""

    @classmethod
    def build_request(
        cls,
        member: Member | None,
        fee_item: FeeItem | None,
        reference: str | None = None,
    ) -> GatewayRequest:
        """
        Build the gateway request for one attempt.

        Raises:
            PaymentValidationError: If member or fee item is missing
        """
        if member is None:
            raise PaymentValidationError("Member is required", error_code="MEMBER_REQUIRED")
        if fee_item is None:
            raise PaymentValidationError("Fee item is required", error_code="FEE_ITEM_REQUIRED")
        if not member.email:
            raise PaymentValidationError(
                "Member has no email address", error_code="MEMBER_EMAIL_REQUIRED"
            )

        return GatewayRequest(
            reference=reference or ReferenceGenerator.generate(),
            email=member.email,
            amount=fee_item.amount_in_minor_units(),
            public_key=getattr(settings, "PAYSTACK_PUBLIC_KEY", ""),
            currency=getattr(settings, "PAYMENTS_CURRENCY", "NGN"),
            callback_url=getattr(settings, "PAYSTACK_CALLBACK_URL", ""),
            metadata={
                "fee_item_id": fee_item.id,
                "payment_type": fee_item.name,
                "matric_number": member.matric_number or "",
                "member_id": str(member.pk),
            },
        )

    @classmethod
    def start_checkout(
        cls,
        member: Member,
        fee_item: FeeItem,
        gateway: PaymentGateway | None = None,
        on_success: Callable[[TransactionRecord], Any] | None = None,
        on_cancel: Callable[[], Any] | None = None,
        store: LedgerStore | None = None,
        registry: PendingPaymentRegistry | None = None,
    ) -> GatewaySession:
        """
        Open a checkout for a fee item.

        Args:
            member: Paying member
            fee_item: Item being paid for
            gateway: Gateway collaborator (defaults to PaystackAdapter)
            on_success: Called with the stored record once the payment is recorded
            on_cancel: Called after a cancelled checkout is discarded
            store: Ledger store for the advisory "already paid" check
            registry: Pending attempt registry

        Returns:
            The open GatewaySession

        Raises:
            PaymentValidationError: Missing member or fee item
            AlreadyPaidError: The member already paid this item
            GatewayError: The gateway refused to open the checkout
        """
        logger = cls.get_logger()
        gateway = gateway or PaystackAdapter
        store = store or DjangoLedgerStore()
        registry = registry or PendingPaymentRegistry()

        request = cls.build_request(member, fee_item)

        try:
            paid = store.find_success(member.pk, fee_item.id)
        except LedgerReadError:
            logger.warning(
                "Could not check payment history; continuing checkout",
                extra={"member_id": str(member.pk), "fee_item_id": fee_item.id},
            )
            paid = None
        if paid is not None:
            raise AlreadyPaidError(
                f"{fee_item.name} has already been paid",
                details={"fee_item_id": fee_item.id, "reference": paid.gateway_reference},
            )

        registry.register(
            PendingPayment(
                reference=request.reference,
                member_id=str(member.pk),
                fee_item_id=fee_item.id,
                amount=fee_item.amount,
            )
        )

        reference = request.reference

        def handle_success(result: GatewayResult) -> None:
            record = cls.complete(reference, result, store=store, registry=registry)
            if on_success is not None:
                on_success(record)

        def handle_cancel() -> None:
            cls.cancel(reference, registry=registry)
            if on_cancel is not None:
                on_cancel()

        try:
            session = gateway.initiate(request, handle_success, handle_cancel)
        except GatewayError:
            registry.discard(reference)
            raise

        logger.info(
            "Checkout started",
            extra={
                "reference": reference,
                "member_id": str(member.pk),
                "fee_item_id": fee_item.id,
                "amount": request.amount,
                "mode": session.mode,
            },
        )
        return session

    @classmethod
    def complete(
        cls,
        reference: str,
        gateway_result: GatewayResult,
        member: Member | None = None,
        store: LedgerStore | None = None,
        registry: PendingPaymentRegistry | None = None,
    ) -> TransactionRecord:
        """
        Finish a checkout the gateway reported as successful.

        A repeated call for an already-recorded reference returns the
        stored record. If recording fails the attempt is reopened, so the
        same callback can be retried.

        Args:
            reference: Reference issued by start_checkout
            gateway_result: Gateway outcome for that reference
            member: If given, the attempt must belong to this member

        Raises:
            PaymentValidationError: Unknown, expired or foreign session, or
                a result for another reference
            RecordingError: The payment could not be recorded
        """
        logger = cls.get_logger()
        store = store or DjangoLedgerStore()
        registry = registry or PendingPaymentRegistry()

        if gateway_result is None or gateway_result.reference != reference:
            raise PaymentValidationError(
                "Gateway result does not match the payment reference",
                error_code="REFERENCE_MISMATCH",
                details={"reference": reference},
            )

        # Leave the attempt open; the gateway may still settle it
        if not gateway_result.is_success:
            raise PaymentValidationError(
                "Gateway did not report a successful payment",
                error_code="PAYMENT_NOT_SUCCESSFUL",
                details={"reference": reference, "status": gateway_result.status},
            )

        cls._check_owner(registry.peek(reference), member, reference)

        pending = registry.claim(reference)
        if pending is None:
            try:
                existing = store.get_by_reference(reference)
            except LedgerReadError as e:
                logger.error(
                    "Could not check for a recorded payment",
                    extra={"reference": reference, "error": str(e)},
                )
                raise RecordingError(reference) from e
            if existing is not None and (member is None or existing.member_id == member.pk):
                logger.info("Callback replayed for recorded payment", extra={"reference": reference})
                return existing
            raise PaymentValidationError(
                "Unknown or expired payment session",
                error_code="UNKNOWN_PAYMENT_SESSION",
                details={"reference": reference},
            )

        try:
            return cls._record(pending, gateway_result, member, store)
        except DuplicatePaymentError:
            raise
        except RecordingError:
            # Nothing was stored; a retried callback must find the attempt again
            cls._reopen(registry, pending)
            raise

    @classmethod
    def cancel(
        cls,
        reference: str,
        member: Member | None = None,
        registry: PendingPaymentRegistry | None = None,
    ) -> ServiceResult[str]:
        """
        Discard a checkout the member abandoned.

        Nothing was written when the checkout opened, so there is nothing to
        roll back.
        """
        registry = registry or PendingPaymentRegistry()

        try:
            cls._check_owner(registry.peek(reference), member, reference)
        except PaymentValidationError as e:
            return ServiceResult.from_exception(e)

        if registry.claim(reference) is None:
            return ServiceResult.failure(
                "Unknown or expired payment session", "UNKNOWN_PAYMENT_SESSION"
            )

        cls.get_logger().info("Checkout cancelled", extra={"reference": reference})
        return ServiceResult.success(reference)

    # =========================================================================
    # Helpers
    # =========================================================================

    @classmethod
    def _record(cls, pending, gateway_result, member, store) -> TransactionRecord:
        try:
            payer = member if member is not None else cls._load_member(pending)
            fee_item = get_fee_catalog().get(pending.fee_item_id)
        except PaymentValidationError as e:
            # The attempt is already claimed and the gateway has the money
            cls.get_logger().error(
                "Cannot resolve claimed payment",
                extra={"reference": pending.reference, "error_code": e.error_code},
            )
            raise RecordingError(pending.reference) from e

        return ReconciliationService.record_success(payer, fee_item, gateway_result, store=store)

    @classmethod
    def _reopen(cls, registry, pending) -> None:
        try:
            registry.register(pending)
        except ValueError:
            cls.get_logger().warning(
                "Pending payment already reopened", extra={"reference": pending.reference}
            )

    @staticmethod
    def _check_owner(pending, member, reference) -> None:
        if pending is not None and member is not None and pending.member_id != str(member.pk):
            raise PaymentValidationError(
                "Payment session belongs to another member",
                error_code="SESSION_MEMBER_MISMATCH",
                details={"reference": reference},
            )

    @staticmethod
    def _load_member(pending: PendingPayment) -> Member:
        Member = get_user_model()
        try:
            return Member.objects.get(pk=pending.member_id)
        except Member.DoesNotExist:
            raise PaymentValidationError(
                "Member for this payment no longer exists",
                error_code="MEMBER_REQUIRED",
                details={"reference": pending.reference},
            ) from None
