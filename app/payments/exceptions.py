"""
Payment-specific exceptions.

This module provides the exception hierarchy for the payment flow, from
fee selection through gateway checkout to recording the ledger entry.

Exception Hierarchy:
    PaymentError (base for payment domain)
    ├── PaymentValidationError - Broken preconditions (also a core ValidationError)
    │   ├── FeeItemNotFound - Unknown fee item id
    │   └── AlreadyPaidError - Fee item already settled for this member
    ├── GatewayError - Gateway rejected or failed a request
    │   └── GatewayUnavailableError - Network failure or timeout talking to the gateway
    └── RecordingError - Money moved but the ledger entry did not persist
        └── DuplicatePaymentError - A second successful payment for a settled item

Severity:
    RecordingError is the most severe class: the gateway has already
    captured the money. It always carries the gateway reference and a
    support instruction, is logged at ERROR, and is never retried.

Usage:
    from payments.exceptions import RecordingError

    try:
        record = ReconciliationService.record_success(member, fee_item, result)
    except RecordingError as e:
        return Response(e.to_dict(), status=502)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings

from core.exceptions import BaseApplicationError, ValidationError

if TYPE_CHECKING:
    from typing import Any


# =============================================================================
# Payment Domain Exceptions
# =============================================================================


class PaymentError(BaseApplicationError):
    """
    Base exception for all payment operations.

    Example:
        try:
            session = PaymentInitiationService.start_checkout(member, fee_item)
        except PaymentError as e:
            logger.warning(f"Checkout failed: {e.error_code}")
    """

    default_error_code: str = "PAYMENT_ERROR"


class PaymentValidationError(PaymentError, ValidationError):
    """
    Raised when a payment precondition is not met.

    A missing member or fee item, or a blank gateway reference, means the
    caller reached a state it should not have. Surfaced to the member as a
    generic retry prompt.
    """

    default_error_code: str = "PAYMENT_VALIDATION_ERROR"


class FeeItemNotFound(PaymentValidationError):
    """Raised when a fee item id is not in the catalog."""

    default_error_code: str = "FEE_ITEM_NOT_FOUND"


class AlreadyPaidError(PaymentValidationError):
    """
    Raised when a member starts checkout for an item they already paid.

    This check is advisory. The ledger store's conditional append is what
    actually prevents a second success record.
    """

    default_error_code: str = "ALREADY_PAID"


# =============================================================================
# Gateway Exceptions
# =============================================================================


class GatewayError(PaymentError):
    """
    Raised when the payment gateway rejects or fails a request.

    Attributes:
        gateway_message: Message returned by the gateway, if any
    """

    default_error_code: str = "GATEWAY_ERROR"

    def __init__(
        self,
        message: str,
        gateway_message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.gateway_message = gateway_message
        details = dict(details or {})
        if gateway_message:
            details.setdefault("gateway_message", gateway_message)
        super().__init__(message, error_code=error_code, details=details)


class GatewayUnavailableError(GatewayError):
    """Raised on connection errors and timeouts talking to the gateway."""

    default_error_code: str = "GATEWAY_UNAVAILABLE"


# =============================================================================
# Recording Exceptions
# =============================================================================


class RecordingError(PaymentError):
    """
    Raised when a successful gateway payment could not be recorded.

    Attributes:
        reference: The gateway reference the member must quote to support
        support_instruction: What the member should do next

    Example:
        raise RecordingError(
            "REF123",
            "Payment was received but could not be recorded",
        )
    """

    default_error_code: str = "RECORDING_ERROR"

    def __init__(
        self,
        reference: str,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.reference = reference
        self.support_instruction = support_instruction(reference)
        message = message or "Payment was received but could not be recorded"
        details = {
            **(details or {}),
            "reference": reference,
            "support_instruction": self.support_instruction,
        }
        super().__init__(message, error_code=error_code, details=details)


class DuplicatePaymentError(RecordingError):
    """
    Raised when a second, different successful payment arrives for a fee item
    the member has already paid.

    The ledger keeps the first record; the new reference is reported so the
    second charge can be refunded by hand.
    """

    default_error_code: str = "DUPLICATE_PAYMENT"


def support_instruction(reference: str) -> str:
    """Instruction shown to the member alongside a recording failure."""
    contact = getattr(settings, "PAYMENTS_SUPPORT_CONTACT", "the department office")
    return (
        f"Please contact {contact} with your payment reference {reference} "
        "so the payment can be reconciled manually."
    )
