"""
Ledger store exceptions.

These are raised by the ledger store adapter and translated into payment
exceptions by the services that call it.

Exception Hierarchy:
    LedgerError (base)
    ├── LedgerWriteError - Append failed or returned no confirmed identity
    ├── LedgerReadError - Query failed
    ├── DuplicateSuccessRecord - A success row for (member, fee item) already exists
    └── DuplicateReference - A row with this gateway reference already exists

Usage:
    from payments.ledger.exceptions import DuplicateSuccessRecord

    try:
        store.append(record)
    except DuplicateSuccessRecord as e:
        existing = e.existing_reference
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import BaseApplicationError

if TYPE_CHECKING:
    from typing import Any


class LedgerError(BaseApplicationError):
    """
    Base exception for all ledger store operations.

    Example:
        try:
            records = store.query_by_member(member.id)
        except LedgerError as e:
            logger.error(f"Ledger operation failed: {e}")
    """

    default_error_code: str = "LEDGER_ERROR"


class LedgerWriteError(LedgerError):
    """Raised when an append fails for any reason other than a duplicate."""

    default_error_code: str = "LEDGER_WRITE_ERROR"


class LedgerReadError(LedgerError):
    """Raised when reading ledger entries fails."""

    default_error_code: str = "LEDGER_READ_ERROR"


class DuplicateSuccessRecord(LedgerError):
    """
    Raised when appending a success row for an already-paid fee item.

    Attributes:
        existing_reference: Gateway reference of the row that won, if known
    """

    default_error_code: str = "DUPLICATE_SUCCESS_RECORD"

    def __init__(
        self,
        message: str,
        existing_reference: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.existing_reference = existing_reference
        details = dict(details or {})
        if existing_reference:
            details["existing_reference"] = existing_reference
        super().__init__(message, error_code=error_code, details=details)


class DuplicateReference(LedgerError):
    """Raised when appending a row whose gateway reference is already stored."""

    default_error_code: str = "DUPLICATE_REFERENCE"
