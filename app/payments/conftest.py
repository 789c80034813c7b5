"""
Pytest fixtures shared by every payments test package.

Sections:
    - Member Fixtures
    - Catalog Fixtures
    - Gateway Fixtures
    - Ledger / Registry Fixtures
    - API Client Fixtures
"""

from __future__ import annotations

import datetime

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from members.tests.factories import MemberFactory
from payments.adapters import GatewayResult, GatewaySession
from payments.catalog import FeeCatalog, FeeItem, reset_fee_catalog_cache
from payments.ledger import DjangoLedgerStore
from payments.services import PendingPaymentRegistry


# =============================================================================
# Member Fixtures
# =============================================================================


@pytest.fixture
def member(db):
    """Member who pays in most tests."""
    return MemberFactory(
        email="ada@example.com",
        first_name="Ada",
        surname="Obi",
        matric_number="CS/2021/001",
        level="nd2",
    )


@pytest.fixture
def other_member(db):
    """A second member, for ownership checks."""
    return MemberFactory(
        email="bola@example.com",
        first_name="Bola",
        surname="Ade",
        matric_number="CS/2021/002",
    )


# =============================================================================
# Catalog Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def fresh_fee_catalog():
    """Rebuild the process-wide catalog from settings for every test."""
    reset_fee_catalog_cache()
    yield
    reset_fee_catalog_cache()


@pytest.fixture
def departmental_fee():
    return FeeItem(
        id="departmental-fee",
        name="Departmental Fee",
        amount=2500,
        description="Annual departmental fee for NACOS members",
        deadline=datetime.date(2025, 3, 31),
    )


@pytest.fixture
def week_fee():
    return FeeItem(
        id="department-week-fee",
        name="Department Week Fee",
        amount=3500,
        description="Fee for departmental week activities and events",
        deadline=datetime.date(2025, 2, 28),
    )


@pytest.fixture
def fee_catalog(departmental_fee, week_fee):
    """Same two items as the default settings catalog."""
    return FeeCatalog([departmental_fee, week_fee])


# =============================================================================
# Gateway Fixtures
# =============================================================================


class FakeGateway:
    """
    In-memory gateway.

    Returns a real GatewaySession so tests drive the success and cancel
    callbacks exactly as the browser callback would.
    """

    def __init__(self, authorization_url="", error=None):
        self.authorization_url = authorization_url
        self.error = error
        self.requests = []
        self.sessions = []

    def initiate(self, request, on_success=None, on_cancel=None):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        session = GatewaySession(
            request,
            on_success=on_success,
            on_cancel=on_cancel,
            authorization_url=self.authorization_url,
        )
        self.sessions.append(session)
        return session


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def success_result():
    """Build a success GatewayResult for a reference."""

    def _build(reference, amount=None):
        return GatewayResult(reference=reference, status="success", amount=amount)

    return _build


# =============================================================================
# Ledger / Registry Fixtures
# =============================================================================


@pytest.fixture
def store():
    return DjangoLedgerStore()


@pytest.fixture
def registry():
    """Registry over the test cache, emptied before and after each test."""
    cache.clear()
    yield PendingPaymentRegistry(cache_backend=cache)
    cache.clear()


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


def client_for(member) -> APIClient:
    client = APIClient()
    refresh = RefreshToken.for_user(member)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client


@pytest.fixture
def authenticated_client(member):
    """API client authenticated as the ``member`` fixture."""
    return client_for(member)


@pytest.fixture
def other_client(other_member):
    """API client authenticated as ``other_member``."""
    return client_for(other_member)
