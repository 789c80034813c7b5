"""
Payments app configuration.

This app provides the dues payment flow:
- Fee catalog loaded from settings
- Paystack checkout and callback handling
- Append-only ledger of recorded payments
- Dashboard status and PDF receipts
"""

from django.apps import AppConfig
from django.core.signals import setting_changed


def _reset_catalog(*, setting, **kwargs):
    if setting == "PAYMENTS_FEE_CATALOG":
        from payments.catalog import reset_fee_catalog_cache

        reset_fee_catalog_cache()


class PaymentsConfig(AppConfig):
    """Configuration for the payments application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
    verbose_name = "Payments"

    def ready(self):
        setting_changed.connect(_reset_catalog, dispatch_uid="payments_reset_catalog")
