"""
Ledger entry model for member payments.

A TransactionRecord is written once per successful gateway payment and is
never updated or deleted afterwards. It carries a snapshot of the member's
display fields so a receipt printed years later shows what was true at
payment time.

Database guarantees:
    - gateway_reference is unique (one row per gateway transaction)
    - at most one ``success`` row per (member, fee_item_id)
    - amount is positive

Related files:
    - ledger/store.py: The only writer of this model
    - services/projection.py: Derives paid/pending status from these rows
"""

from django.conf import settings
from django.db import models
from django.utils import timezone

from core.model_mixins import AppendOnlyMixin, UUIDPrimaryKeyMixin


class TransactionStatus(models.TextChoices):
    SUCCESS = "success", "Success"
    FAILED = "failed", "Failed"


class TransactionRecord(UUIDPrimaryKeyMixin, AppendOnlyMixin, models.Model):
    """
    Immutable record of one payment attempt outcome.

    Fields:
        member: Who paid
        fee_item_id: Catalog id of the item paid for (join key)
        payment_type: Catalog name of the item at write time (display only)
        amount: Catalog amount in whole currency units at write time
        gateway_reference: Gateway transaction reference, also the receipt number
        status: success or failed
        member_name / matric_number / level: Member snapshot at write time
        created_at: When the payment was recorded

    Usage:
        store = DjangoLedgerStore()
        records = store.query_by_member(member.id)
    """

    member = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="transactions",
    )
    fee_item_id = models.CharField(
        max_length=64,
        db_index=True,
        help_text="Stable catalog id of the fee item",
    )
    payment_type = models.CharField(
        max_length=150,
        help_text="Fee item name at the time of payment",
    )
    amount = models.PositiveBigIntegerField(
        help_text="Amount in whole currency units",
    )
    gateway_reference = models.CharField(
        max_length=100,
        unique=True,
        help_text="Gateway transaction reference",
    )
    status = models.CharField(
        max_length=10,
        choices=TransactionStatus.choices,
        default=TransactionStatus.SUCCESS,
    )

    member_name = models.CharField(max_length=255, blank=True)
    matric_number = models.CharField(max_length=50, blank=True)
    level = models.CharField(max_length=10, blank=True)

    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["member", "fee_item_id"],
                condition=models.Q(status="success"),
                name="unique_success_per_member_fee_item",
            ),
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="transaction_amount_positive",
            ),
        ]

    def __str__(self):
        return f"{self.gateway_reference} {self.payment_type} ({self.status})"

    @property
    def is_success(self) -> bool:
        return self.status == TransactionStatus.SUCCESS
