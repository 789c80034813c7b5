import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="TransactionRecord",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "fee_item_id",
                    models.CharField(
                        db_index=True,
                        help_text="Stable catalog id of the fee item",
                        max_length=64,
                    ),
                ),
                (
                    "payment_type",
                    models.CharField(
                        help_text="Fee item name at the time of payment",
                        max_length=150,
                    ),
                ),
                (
                    "amount",
                    models.PositiveBigIntegerField(help_text="Amount in whole currency units"),
                ),
                (
                    "gateway_reference",
                    models.CharField(
                        help_text="Gateway transaction reference",
                        max_length=100,
                        unique=True,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("success", "Success"), ("failed", "Failed")],
                        default="success",
                        max_length=10,
                    ),
                ),
                ("member_name", models.CharField(blank=True, max_length=255)),
                ("matric_number", models.CharField(blank=True, max_length=50)),
                ("level", models.CharField(blank=True, max_length=10)),
                (
                    "created_at",
                    models.DateTimeField(db_index=True, default=django.utils.timezone.now),
                ),
                (
                    "member",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transactions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.AddConstraint(
            model_name="transactionrecord",
            constraint=models.UniqueConstraint(
                condition=models.Q(("status", "success")),
                fields=("member", "fee_item_id"),
                name="unique_success_per_member_fee_item",
            ),
        ),
        migrations.AddConstraint(
            model_name="transactionrecord",
            constraint=models.CheckConstraint(
                condition=models.Q(("amount__gt", 0)),
                name="transaction_amount_positive",
            ),
        ),
    ]
