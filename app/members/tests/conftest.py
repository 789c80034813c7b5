"""
Test configuration and fixtures for member tests.

Usage:
    def test_example(member, authenticated_client):
        response = authenticated_client.get('/api/v1/members/me/')
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from members.models import Member
from members.tests.factories import MemberFactory


# =============================================================================
# Member Fixtures
# =============================================================================


@pytest.fixture
def member(db):
    """Create a basic active member."""
    return MemberFactory(
        email="ada@example.com",
        first_name="Ada",
        surname="Obi",
        matric_number="CS/2021/001",
    )


@pytest.fixture
def superuser(db):
    """Create a superuser with admin privileges."""
    return Member.objects.create_superuser(
        email="admin@example.com", password="AdminPass123!"
    )


@pytest.fixture
def registration_data():
    """Valid registration payload."""
    return {
        "email": "chika@example.com",
        "password": "S3curePass!42",
        "first_name": "Chika",
        "middle_name": "Amaka",
        "surname": "Eze",
        "matric_number": "cs/2022/014",
        "level": "hnd1",
    }


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated API client for public endpoints."""
    return APIClient()


@pytest.fixture
def authenticated_client(member):
    """API client authenticated with a JWT for the default member fixture."""
    client = APIClient()
    refresh = RefreshToken.for_user(member)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client
