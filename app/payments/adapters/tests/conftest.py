"""
Pytest fixtures for Paystack adapter tests.

Sections:
    - Test Data Fixtures
    - Mock HTTP Fixtures
"""

from unittest.mock import MagicMock, patch

import pytest

from payments.adapters import GatewayRequest


# =============================================================================
# Test Data Fixtures
# =============================================================================


@pytest.fixture
def gateway_request():
    return GatewayRequest(
        reference="DUES-0123456789abcdef01234567",
        email="ada@example.com",
        amount=250000,
        public_key="pk_test_123",
        metadata={"fee_item_id": "departmental-fee"},
    )


@pytest.fixture
def paystack_keys(settings):
    settings.PAYSTACK_SECRET_KEY = "sk_test_secret"
    settings.PAYSTACK_PUBLIC_KEY = "pk_test_123"
    settings.PAYSTACK_BASE_URL = "https://api.paystack.test/"
    settings.PAYSTACK_API_TIMEOUT_SECONDS = 5
    return settings


# =============================================================================
# Mock HTTP Fixtures
# =============================================================================


def make_response(status_code=200, body=None, reason="OK"):
    """Fake requests.Response with the attributes the adapter reads."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.reason = reason
    if body is None:
        response.json.side_effect = ValueError("No JSON")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def mock_request():
    """Patch requests.request as seen by the adapter module."""
    with patch("payments.adapters.paystack_adapter.requests.request") as mocked:
        yield mocked
