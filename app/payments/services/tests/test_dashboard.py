"""Tests for DashboardService."""

import datetime
from unittest.mock import MagicMock

import pytest
from django.utils import timezone

from payments.ledger import LedgerReadError
from payments.services import DashboardService
from payments.services.dashboard import LOAD_ERROR_MESSAGE
from payments.tests.factories import TransactionRecordFactory

TODAY = datetime.date(2025, 3, 20)


@pytest.mark.django_db
class TestGetDashboard:
    """Tests for DashboardService.get_dashboard."""

    def test_new_member(self, member, fee_catalog):
        dashboard = DashboardService.get_dashboard(member, catalog=fee_catalog, today=TODAY)

        assert dashboard.total_paid == 0
        assert dashboard.completed_payments == []
        assert [item.id for item in dashboard.pending_payments] == [
            "departmental-fee",
            "department-week-fee",
        ]
        assert dashboard.transactions == []
        assert dashboard.error is None

    def test_after_one_payment(self, member, fee_catalog):
        TransactionRecordFactory(member=member)

        dashboard = DashboardService.get_dashboard(member, catalog=fee_catalog, today=TODAY)

        assert dashboard.total_paid == 2500
        assert [item.id for item in dashboard.completed_payments] == ["departmental-fee"]
        assert [item.id for item in dashboard.pending_payments] == ["department-week-fee"]

    def test_transactions_newest_first(self, member, fee_catalog):
        now = timezone.now()
        older = TransactionRecordFactory(
            member=member, created_at=now - datetime.timedelta(days=3)
        )
        newer = TransactionRecordFactory(
            member=member,
            fee_item_id="department-week-fee",
            payment_type="Department Week Fee",
            amount=3500,
            created_at=now,
        )

        dashboard = DashboardService.get_dashboard(member, catalog=fee_catalog, today=TODAY)

        assert dashboard.transactions == [newer, older]
        assert dashboard.total_paid == 6000

    def test_only_own_transactions(self, member, other_member, fee_catalog):
        TransactionRecordFactory(member=other_member)

        dashboard = DashboardService.get_dashboard(member, catalog=fee_catalog, today=TODAY)

        assert dashboard.transactions == []
        assert dashboard.total_paid == 0

    def test_payment_options(self, member, fee_catalog):
        TransactionRecordFactory(member=member)

        dashboard = DashboardService.get_dashboard(member, catalog=fee_catalog, today=TODAY)

        departmental, week = dashboard.payment_options
        assert departmental.is_paid is True
        assert departmental.days_to_deadline == 11
        assert departmental.deadline_approaching is True
        assert week.is_paid is False
        assert week.days_to_deadline == -20
        assert week.deadline_approaching is False

    def test_read_failure_degrades(self, member, fee_catalog):
        """
        A failed ledger read should still return a usable dashboard.

        Why it matters: The member sees an error banner, not a crash.
        """
        store = MagicMock()
        store.query_by_member.side_effect = LedgerReadError("database down")

        dashboard = DashboardService.get_dashboard(
            member, store=store, catalog=fee_catalog, today=TODAY
        )

        assert dashboard.error == LOAD_ERROR_MESSAGE
        assert dashboard.transactions == []
        assert dashboard.total_paid == 0
        assert len(dashboard.pending_payments) == 2

    def test_uses_default_catalog(self, member):
        dashboard = DashboardService.get_dashboard(member, today=TODAY)

        assert len(dashboard.payment_options) == 2
