"""
Tests for ReconciliationService.

Tests cover:
- Recording a success with catalog amount and member snapshot
- Precondition failures
- Replay of the same gateway reference
- A second success for an already-paid fee item
- Storage failures surfacing the gateway reference
"""

import logging
from unittest.mock import MagicMock, patch

import pytest
from django.db import DatabaseError

from payments.adapters import GatewayResult
from payments.exceptions import (
    DuplicatePaymentError,
    PaymentValidationError,
    RecordingError,
)
from payments.ledger import DuplicateReference, LedgerReadError, LedgerWriteError
from payments.models import TransactionRecord
from payments.services import ReconciliationService, StatusProjector


@pytest.fixture
def payments_logs(caplog):
    """The payments logger does not propagate; attach caplog to it directly."""
    logger = logging.getLogger("payments")
    logger.addHandler(caplog.handler)
    caplog.set_level(logging.INFO, logger="payments")
    yield caplog
    logger.removeHandler(caplog.handler)


@pytest.mark.django_db
class TestRecordSuccess:
    """Tests for the happy path."""

    def test_records_payment(self, member, departmental_fee, success_result, store):
        record = ReconciliationService.record_success(
            member, departmental_fee, success_result("DUES-1"), store=store
        )

        assert record.pk is not None
        assert record.gateway_reference == "DUES-1"
        assert record.fee_item_id == "departmental-fee"
        assert record.payment_type == "Departmental Fee"
        assert record.amount == 2500
        assert record.status == "success"
        assert record.member_name == "Ada Obi"
        assert record.matric_number == "CS/2021/001"
        assert record.level == "nd2"

    def test_round_trip_through_store(self, member, departmental_fee, success_result, store):
        """The record read back should match the one returned."""
        record = ReconciliationService.record_success(
            member, departmental_fee, success_result("DUES-1"), store=store
        )

        (stored,) = store.query_by_member(member.pk)
        assert stored.pk == record.pk
        assert stored.amount == record.amount
        assert stored.member_name == record.member_name

    def test_catalog_amount_wins(
        self, member, departmental_fee, success_result, store, payments_logs
    ):
        """
        A differing gateway amount should be logged, not stored.

        Why it matters: The ledger amount must always match the catalog price.
        """
        record = ReconciliationService.record_success(
            member, departmental_fee, success_result("DUES-1", amount=100), store=store
        )

        assert record.amount == 2500
        assert "Gateway amount differs" in payments_logs.text

    def test_matching_amount_not_logged(
        self, member, departmental_fee, success_result, store, payments_logs
    ):
        ReconciliationService.record_success(
            member, departmental_fee, success_result("DUES-1", amount=250000), store=store
        )

        assert "Gateway amount differs" not in payments_logs.text

    def test_member_without_matric_number(self, departmental_fee, success_result, store):
        from members.tests.factories import MemberFactory

        staff = MemberFactory(matric_number=None, level="")

        record = ReconciliationService.record_success(
            staff, departmental_fee, success_result("DUES-1"), store=store
        )

        assert record.matric_number == ""
        assert record.level == ""

    def test_two_items_then_projection(
        self, member, fee_catalog, departmental_fee, week_fee, success_result, store
    ):
        ReconciliationService.record_success(
            member, departmental_fee, success_result("DUES-1"), store=store
        )
        ReconciliationService.record_success(member, week_fee, success_result("DUES-2"), store=store)

        status = StatusProjector.project(fee_catalog.list(), store.query_by_member(member.pk))

        assert status.total_paid == 6000
        assert status.pending_items == ()


@pytest.mark.django_db
class TestPreconditions:
    """Tests for rejected inputs."""

    def test_member_required(self, departmental_fee, success_result, store):
        with pytest.raises(PaymentValidationError) as exc_info:
            ReconciliationService.record_success(
                None, departmental_fee, success_result("DUES-1"), store=store
            )

        assert exc_info.value.error_code == "MEMBER_REQUIRED"

    def test_fee_item_required(self, member, success_result, store):
        with pytest.raises(PaymentValidationError) as exc_info:
            ReconciliationService.record_success(member, None, success_result("DUES-1"), store=store)

        assert exc_info.value.error_code == "FEE_ITEM_REQUIRED"

    @pytest.mark.parametrize("result", [None, GatewayResult(reference=""), GatewayResult(reference="  ")])
    def test_reference_required(self, member, departmental_fee, store, result):
        with pytest.raises(PaymentValidationError) as exc_info:
            ReconciliationService.record_success(member, departmental_fee, result, store=store)

        assert exc_info.value.error_code == "REFERENCE_REQUIRED"
        assert not TransactionRecord.objects.exists()

    def test_non_success_rejected(self, member, departmental_fee, store):
        with pytest.raises(PaymentValidationError) as exc_info:
            ReconciliationService.record_success(
                member, departmental_fee, GatewayResult(reference="DUES-1", status="failed"), store=store
            )

        assert exc_info.value.error_code == "PAYMENT_NOT_SUCCESSFUL"


@pytest.mark.django_db
class TestReplayAndDuplicates:
    """Tests for idempotency and double payment."""

    def test_replay_returns_existing(self, member, departmental_fee, success_result, store):
        first = ReconciliationService.record_success(
            member, departmental_fee, success_result("DUES-1"), store=store
        )

        second = ReconciliationService.record_success(
            member, departmental_fee, success_result("DUES-1"), store=store
        )

        assert second.pk == first.pk
        assert TransactionRecord.objects.count() == 1

    def test_reference_reused_for_other_member(
        self, member, other_member, departmental_fee, success_result, store
    ):
        ReconciliationService.record_success(
            member, departmental_fee, success_result("DUES-1"), store=store
        )

        with pytest.raises(RecordingError) as exc_info:
            ReconciliationService.record_success(
                other_member, departmental_fee, success_result("DUES-1"), store=store
            )

        assert exc_info.value.error_code == "REFERENCE_CONFLICT"
        assert TransactionRecord.objects.count() == 1

    def test_second_payment_for_paid_item(
        self, member, departmental_fee, success_result, store, payments_logs
    ):
        """
        Two checkouts for one item: only the first is recorded.

        Why it matters: The second charge must be reported for a refund, not stored.
        """
        ReconciliationService.record_success(
            member, departmental_fee, success_result("DUES-FIRST"), store=store
        )

        with pytest.raises(DuplicatePaymentError) as exc_info:
            ReconciliationService.record_success(
                member, departmental_fee, success_result("DUES-SECOND"), store=store
            )

        error = exc_info.value
        assert error.reference == "DUES-SECOND"
        assert error.details["existing_reference"] == "DUES-FIRST"
        assert "DUES-SECOND" in error.support_instruction
        assert TransactionRecord.objects.count() == 1
        assert "already-paid fee item" in payments_logs.text

    def test_lost_race_with_same_reference(self, member, departmental_fee, success_result):
        """A DuplicateReference from the store means a replay won; return its row."""
        existing = TransactionRecord(
            member=member, fee_item_id="departmental-fee", gateway_reference="DUES-1", amount=2500
        )
        fake_store = MagicMock()
        fake_store.get_by_reference.side_effect = [None, existing]
        fake_store.append.side_effect = DuplicateReference("dup")

        record = ReconciliationService.record_success(
            member, departmental_fee, success_result("DUES-1"), store=fake_store
        )

        assert record is existing


@pytest.mark.django_db
class TestRecordingFailures:
    """Tests for failures after the gateway captured the money."""

    def make_store(self, **overrides):
        fake_store = MagicMock()
        fake_store.get_by_reference.return_value = None
        for name, value in overrides.items():
            setattr(fake_store, name, value)
        return fake_store

    def test_write_error(self, member, departmental_fee, success_result, payments_logs):
        fake_store = self.make_store()
        fake_store.append.side_effect = LedgerWriteError("disk full")

        with pytest.raises(RecordingError) as exc_info:
            ReconciliationService.record_success(
                member, departmental_fee, success_result("DUES-1"), store=fake_store
            )

        error = exc_info.value
        assert error.error_code == "RECORDING_ERROR"
        assert error.reference == "DUES-1"
        assert error.details["reference"] == "DUES-1"
        assert "DUES-1" in error.details["support_instruction"]
        assert "Payment not recorded" in payments_logs.text

    def test_failed_write_leaves_no_record(self, member, departmental_fee, success_result, store):
        """
        A write that fails in the database should leave nothing in the ledger.

        Why it matters: The member's next dashboard must not show a payment
        that support still has to reconcile by hand.
        """
        with patch(
            "payments.models.TransactionRecord.save",
            side_effect=DatabaseError("database is locked"),
        ):
            with pytest.raises(RecordingError) as exc_info:
                ReconciliationService.record_success(
                    member, departmental_fee, success_result("DUES-1"), store=store
                )

        assert exc_info.value.reference == "DUES-1"
        assert store.query_by_member(member.pk) == []

    def test_unexpected_error(self, member, departmental_fee, success_result):
        fake_store = self.make_store()
        fake_store.append.side_effect = RuntimeError("boom")

        with pytest.raises(RecordingError):
            ReconciliationService.record_success(
                member, departmental_fee, success_result("DUES-1"), store=fake_store
            )

    def test_missing_record_id(self, member, departmental_fee, success_result):
        """A store that confirms nothing must not be treated as success."""
        fake_store = self.make_store()
        fake_store.append.return_value = None

        with pytest.raises(RecordingError):
            ReconciliationService.record_success(
                member, departmental_fee, success_result("DUES-1"), store=fake_store
            )

    def test_lookup_failure(self, member, departmental_fee, success_result):
        fake_store = self.make_store()
        fake_store.get_by_reference.side_effect = LedgerReadError("gone")

        with pytest.raises(RecordingError) as exc_info:
            ReconciliationService.record_success(
                member, departmental_fee, success_result("DUES-1"), store=fake_store
            )

        fake_store.append.assert_not_called()
        assert exc_info.value.reference == "DUES-1"

    def test_support_contact_from_settings(self, settings, member, departmental_fee, success_result):
        settings.PAYMENTS_SUPPORT_CONTACT = "the class rep"
        fake_store = self.make_store()
        fake_store.append.side_effect = LedgerWriteError("disk full")

        with pytest.raises(RecordingError) as exc_info:
            ReconciliationService.record_success(
                member, departmental_fee, success_result("DUES-1"), store=fake_store
            )

        assert exc_info.value.support_instruction.startswith("Please contact the class rep")
