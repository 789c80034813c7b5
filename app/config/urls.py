"""
URL configuration for the Django application.

The `urlpatterns` list routes URLs to views. This is the root URL configuration
that includes all app-specific routes.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /docs/                         - ReDoc API documentation
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/members/               - Member endpoints
        register/                  - Create an account
        login/                     - Email/password login (JWT pair)
        token/refresh/             - Refresh access token
        me/                        - Current member
    /api/v1/payments/              - Payment endpoints
        fees/                      - Fee catalog with paid/deadline flags
        checkout/                  - Start a Paystack checkout
        callback/                  - Report the checkout outcome
        dashboard/                 - Totals, completed/pending fees, history
        transactions/              - Transaction history
        transactions/{ref}/receipt/ - PDF receipt download

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
# All routes here are prefixed with /api/v1/ automatically
api_v1_patterns = [
    # Members (registration, JWT login)
    path("members/", include("members.urls")),
    # Payments
    path("payments/", include("payments.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("docs/", SpectacularRedocView.as_view(url_name="schema"), name="docs"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Dues Portal Admin"
admin.site.site_title = "Dues Portal"
admin.site.index_title = "Members and payments"
