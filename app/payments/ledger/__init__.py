"""
Ledger store: append-only persistence of payment records.

Public API:
    LedgerStore - Protocol the payment services depend on
    DjangoLedgerStore - ORM implementation

    Exceptions:
        LedgerError - Base exception for store operations
        LedgerWriteError, LedgerReadError
        DuplicateSuccessRecord, DuplicateReference

Usage:
    from payments.ledger import DjangoLedgerStore, DuplicateSuccessRecord
"""

from .exceptions import (
    DuplicateReference,
    DuplicateSuccessRecord,
    LedgerError,
    LedgerReadError,
    LedgerWriteError,
)
from .store import DjangoLedgerStore, LedgerStore

__all__ = [
    "DjangoLedgerStore",
    "DuplicateReference",
    "DuplicateSuccessRecord",
    "LedgerError",
    "LedgerReadError",
    "LedgerStore",
    "LedgerWriteError",
]
