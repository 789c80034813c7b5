"""
Django admin configuration for payment models.

Ledger entries are read-only in the admin: they can be searched and
inspected, never added, edited or deleted.
"""

from django.contrib import admin

from payments.models import TransactionRecord


@admin.register(TransactionRecord)
class TransactionRecordAdmin(admin.ModelAdmin):
    list_display = (
        "gateway_reference",
        "member_name",
        "matric_number",
        "payment_type",
        "amount",
        "status",
        "created_at",
    )
    list_filter = ("status", "fee_item_id", "level")
    search_fields = ("gateway_reference", "matric_number", "member_name", "member__email")
    ordering = ("-created_at",)
    date_hierarchy = "created_at"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
