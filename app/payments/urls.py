"""
URL configuration for the payments app.

All routes are prefixed with /api/v1/payments/ when included in the main URLconf.

Usage:
    # In config/urls.py
    api_v1_patterns = [
        path("payments/", include("payments.urls")),
    ]
"""

from django.urls import path

from payments.views import (
    CheckoutView,
    DashboardView,
    FeeCatalogView,
    PaymentCallbackView,
    ReceiptView,
    TransactionListView,
)

app_name = "payments"

urlpatterns = [
    path("fees/", FeeCatalogView.as_view(), name="fees"),
    path("checkout/", CheckoutView.as_view(), name="checkout"),
    path("callback/", PaymentCallbackView.as_view(), name="callback"),
    path("dashboard/", DashboardView.as_view(), name="dashboard"),
    path("transactions/", TransactionListView.as_view(), name="transactions"),
    path(
        "transactions/<str:reference>/receipt/",
        ReceiptView.as_view(),
        name="receipt",
    ),
]
