"""
Payments app: the dues payment reconciliation engine.

Components:
    catalog.py - Fee catalog loaded from settings
    adapters/ - Paystack gateway adapter and gateway types
    ledger/ - Append-only ledger store over TransactionRecord
    services/ - Initiation, reconciliation, status projection, dashboard
    receipts.py - PDF receipts for recorded payments
"""
