"""
Payment services.

This module provides:
- PaymentInitiationService: Opens gateway checkouts and routes their outcome
- ReconciliationService: Records a gateway success as one ledger entry
- StatusProjector: Derives paid/pending status from ledger entries
- DashboardService: The member dashboard read model
- PendingPaymentRegistry: Open checkouts awaiting the gateway

Usage:
    from payments.services import PaymentInitiationService

    session = PaymentInitiationService.start_checkout(member, fee_item)

    from payments.services import DashboardService

    dashboard = DashboardService.get_dashboard(member)
    dashboard.total_paid
"""

from payments.services.dashboard import Dashboard, DashboardService, PaymentOption
from payments.services.initiation import PaymentInitiationService
from payments.services.pending import PendingPayment, PendingPaymentRegistry
from payments.services.projection import DerivedStatus, StatusProjector
from payments.services.reconciliation import ReconciliationService

__all__ = [
    "Dashboard",
    "DashboardService",
    "DerivedStatus",
    "PaymentInitiationService",
    "PaymentOption",
    "PendingPayment",
    "PendingPaymentRegistry",
    "ReconciliationService",
    "StatusProjector",
]
