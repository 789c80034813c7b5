"""
Serializers for payment endpoints.

Fee items and dashboard objects are plain dataclasses, so most of these
are read-only Serializer classes rather than ModelSerializers.
"""

from rest_framework import serializers

from payments.catalog import get_fee_catalog
from payments.models import TransactionRecord


# =============================================================================
# Catalog
# =============================================================================


class FeeItemSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    name = serializers.CharField(read_only=True)
    amount = serializers.IntegerField(read_only=True)
    description = serializers.CharField(read_only=True)
    deadline = serializers.DateField(read_only=True)
    required = serializers.BooleanField(read_only=True)


class PaymentOptionSerializer(serializers.Serializer):
    """A fee item as the member sees it: paid flag and deadline countdown."""

    id = serializers.CharField(source="fee_item.id", read_only=True)
    name = serializers.CharField(source="fee_item.name", read_only=True)
    amount = serializers.IntegerField(source="fee_item.amount", read_only=True)
    description = serializers.CharField(source="fee_item.description", read_only=True)
    deadline = serializers.DateField(source="fee_item.deadline", read_only=True)
    required = serializers.BooleanField(source="fee_item.required", read_only=True)
    is_paid = serializers.BooleanField(read_only=True)
    days_to_deadline = serializers.IntegerField(read_only=True)
    deadline_approaching = serializers.BooleanField(read_only=True)


# =============================================================================
# Ledger
# =============================================================================


class TransactionRecordSerializer(serializers.ModelSerializer):
    reference = serializers.CharField(source="gateway_reference", read_only=True)

    class Meta:
        model = TransactionRecord
        fields = [
            "id",
            "reference",
            "fee_item_id",
            "payment_type",
            "amount",
            "status",
            "member_name",
            "matric_number",
            "level",
            "created_at",
        ]
        read_only_fields = fields


class DashboardSerializer(serializers.Serializer):
    total_paid = serializers.IntegerField(read_only=True)
    completed_payments = FeeItemSerializer(many=True, read_only=True)
    pending_payments = FeeItemSerializer(many=True, read_only=True)
    transactions = TransactionRecordSerializer(many=True, read_only=True)
    payment_options = PaymentOptionSerializer(many=True, read_only=True)
    error = serializers.CharField(read_only=True, allow_null=True)


# =============================================================================
# Checkout
# =============================================================================


class CheckoutRequestSerializer(serializers.Serializer):
    fee_item_id = serializers.CharField(max_length=64)

    def validate_fee_item_id(self, value):
        if value not in get_fee_catalog():
            raise serializers.ValidationError("Unknown fee item.")
        return value


class CheckoutSessionSerializer(serializers.Serializer):
    """What the browser needs to open the gateway checkout."""

    reference = serializers.CharField(read_only=True)
    email = serializers.EmailField(source="request.email", read_only=True)
    amount = serializers.IntegerField(source="request.amount", read_only=True)
    currency = serializers.CharField(source="request.currency", read_only=True)
    public_key = serializers.CharField(source="request.public_key", read_only=True)
    metadata = serializers.DictField(source="request.metadata", read_only=True)
    authorization_url = serializers.CharField(read_only=True)
    access_code = serializers.CharField(read_only=True)
    mode = serializers.CharField(read_only=True)


class PaymentCallbackSerializer(serializers.Serializer):
    """Result the browser reports after the gateway popup closes."""

    STATUS_SUCCESS = "success"
    STATUS_CANCELLED = "cancelled"

    reference = serializers.CharField(max_length=100)
    status = serializers.ChoiceField(choices=[STATUS_SUCCESS, STATUS_CANCELLED])
    amount = serializers.IntegerField(required=False, min_value=0)
