"""
Tests for Paystack adapter.

Tests cover:
- Reference generation
- GatewayRequest / GatewayResult dataclasses
- Inline vs. redirect checkout
- Transaction verification
- Error translation for HTTP and network failures
"""

import pytest
import requests

from payments.adapters import (
    GatewayRequest,
    GatewayResult,
    PaystackAdapter,
    ReferenceGenerator,
)
from payments.adapters.tests.conftest import make_response
from payments.exceptions import GatewayError, GatewayUnavailableError


# =============================================================================
# ReferenceGenerator Tests
# =============================================================================


class TestReferenceGenerator:
    """Tests for ReferenceGenerator."""

    def test_format(self):
        reference = ReferenceGenerator.generate()

        prefix, token = reference.split("-")
        assert prefix == "DUES"
        assert len(token) == 24
        int(token, 16)

    def test_unique(self):
        """Should never repeat, even for back-to-back calls."""
        references = {ReferenceGenerator.generate() for _ in range(500)}

        assert len(references) == 500

    def test_custom_prefix(self):
        assert ReferenceGenerator.generate("NACOS").startswith("NACOS-")

    def test_prefix_from_settings(self, settings):
        settings.PAYMENTS_REFERENCE_PREFIX = "CSC"

        assert ReferenceGenerator.generate().startswith("CSC-")

    def test_empty_prefix(self):
        assert len(ReferenceGenerator.generate("")) == 24


# =============================================================================
# Dataclass Tests
# =============================================================================


class TestGatewayRequest:
    """Tests for GatewayRequest validation."""

    def test_valid(self, gateway_request):
        assert gateway_request.currency == "NGN"
        assert gateway_request.callback_url == ""

    @pytest.mark.parametrize(
        ("field", "value", "message"),
        [
            ("reference", "", "reference is required"),
            ("email", "", "email is required"),
            ("amount", 0, "amount must be positive"),
        ],
    )
    def test_invalid(self, field, value, message):
        kwargs = {"reference": "R", "email": "a@example.com", "amount": 100, "public_key": "pk"}
        kwargs[field] = value

        with pytest.raises(ValueError, match=message):
            GatewayRequest(**kwargs)

    def test_payload_omits_blank_callback(self, gateway_request):
        payload = gateway_request.to_payload()

        assert payload == {
            "reference": "DUES-0123456789abcdef01234567",
            "email": "ada@example.com",
            "amount": 250000,
            "currency": "NGN",
            "metadata": {"fee_item_id": "departmental-fee"},
        }

    def test_payload_includes_callback(self):
        request = GatewayRequest(
            reference="R", email="a@example.com", amount=1, public_key="pk",
            callback_url="https://dues.example.com/paid",
        )

        assert request.to_payload()["callback_url"] == "https://dues.example.com/paid"


class TestGatewayResult:
    """Tests for GatewayResult."""

    def test_from_payload(self):
        result = GatewayResult.from_payload(
            {
                "reference": "DUES-1",
                "status": "success",
                "amount": 250000,
                "currency": "NGN",
                "gateway_response": "Approved",
                "paid_at": "2025-01-10T09:30:00.000Z",
            }
        )

        assert result.is_success
        assert result.amount == 250000
        assert result.gateway_response == "Approved"
        assert result.paid_at == "2025-01-10T09:30:00.000Z"
        assert result.raw["currency"] == "NGN"

    def test_from_payload_abandoned(self):
        result = GatewayResult.from_payload({"reference": "DUES-1", "status": "abandoned"})

        assert not result.is_success
        assert result.amount is None


# =============================================================================
# PaystackAdapter Tests
# =============================================================================


class TestInitiate:
    """Tests for PaystackAdapter.initiate."""

    def test_inline_without_secret_key(self, settings, gateway_request, mock_request):
        """
        Without a secret key, no HTTP call is made.

        Why it matters: The popup flow works with only the public key.
        """
        settings.PAYSTACK_SECRET_KEY = ""

        session = PaystackAdapter.initiate(gateway_request)

        mock_request.assert_not_called()
        assert session.mode == "inline"
        assert session.reference == gateway_request.reference

    def test_redirect_with_secret_key(self, paystack_keys, gateway_request, mock_request):
        mock_request.return_value = make_response(
            body={
                "status": True,
                "message": "Authorization URL created",
                "data": {
                    "authorization_url": "https://checkout.paystack.com/abc",
                    "access_code": "abc",
                    "reference": gateway_request.reference,
                },
            }
        )

        session = PaystackAdapter.initiate(gateway_request)

        assert session.mode == "redirect"
        assert session.authorization_url == "https://checkout.paystack.com/abc"
        assert session.access_code == "abc"
        mock_request.assert_called_once_with(
            "POST",
            "https://api.paystack.test/transaction/initialize",
            headers={
                "Authorization": "Bearer sk_test_secret",
                "Content-Type": "application/json",
            },
            timeout=5,
            json=gateway_request.to_payload(),
        )

    def test_callbacks_wired_to_session(self, settings, gateway_request):
        settings.PAYSTACK_SECRET_KEY = ""
        seen = []

        session = PaystackAdapter.initiate(
            gateway_request, on_success=seen.append, on_cancel=lambda: seen.append("cancel")
        )
        result = GatewayResult(reference=gateway_request.reference)
        session.resolve_success(result)

        assert seen == [result]


class TestVerifyTransaction:
    """Tests for PaystackAdapter.verify_transaction."""

    def test_requires_secret_key(self, settings):
        settings.PAYSTACK_SECRET_KEY = ""

        with pytest.raises(GatewayError) as exc_info:
            PaystackAdapter.verify_transaction("DUES-1")

        assert exc_info.value.error_code == "GATEWAY_NOT_CONFIGURED"

    def test_success(self, paystack_keys, mock_request):
        mock_request.return_value = make_response(
            body={
                "status": True,
                "message": "Verification successful",
                "data": {"reference": "DUES-1", "status": "success", "amount": 250000},
            }
        )

        result = PaystackAdapter.verify_transaction("DUES-1")

        assert result == GatewayResult.from_payload(
            {"reference": "DUES-1", "status": "success", "amount": 250000}
        )
        args, kwargs = mock_request.call_args
        assert args == ("GET", "https://api.paystack.test/transaction/verify/DUES-1")

    def test_failed_transaction_is_not_an_error(self, paystack_keys, mock_request):
        mock_request.return_value = make_response(
            body={"status": True, "data": {"reference": "DUES-1", "status": "failed"}}
        )

        assert not PaystackAdapter.verify_transaction("DUES-1").is_success


class TestErrorTranslation:
    """Tests for HTTP and network error handling."""

    def test_rejected_request(self, paystack_keys, mock_request):
        mock_request.return_value = make_response(
            status_code=400,
            reason="Bad Request",
            body={"status": False, "message": "Transaction reference not found"},
        )

        with pytest.raises(GatewayError) as exc_info:
            PaystackAdapter.verify_transaction("DUES-1")

        assert not isinstance(exc_info.value, GatewayUnavailableError)
        assert exc_info.value.gateway_message == "Transaction reference not found"

    def test_status_false_with_200(self, paystack_keys, mock_request):
        mock_request.return_value = make_response(body={"status": False, "message": "Nope"})

        with pytest.raises(GatewayError):
            PaystackAdapter.verify_transaction("DUES-1")

    def test_server_error(self, paystack_keys, mock_request):
        mock_request.return_value = make_response(status_code=503, reason="Unavailable")

        with pytest.raises(GatewayUnavailableError) as exc_info:
            PaystackAdapter.verify_transaction("DUES-1")

        assert exc_info.value.gateway_message == "Unavailable"

    @pytest.mark.parametrize(
        "error",
        [requests.exceptions.Timeout("slow"), requests.exceptions.ConnectionError("down")],
    )
    def test_network_failure(self, paystack_keys, mock_request, error):
        mock_request.side_effect = error

        with pytest.raises(GatewayUnavailableError):
            PaystackAdapter.verify_transaction("DUES-1")

    def test_other_request_exception(self, paystack_keys, mock_request):
        mock_request.side_effect = requests.exceptions.TooManyRedirects("loop")

        with pytest.raises(GatewayError) as exc_info:
            PaystackAdapter.verify_transaction("DUES-1")

        assert not isinstance(exc_info.value, GatewayUnavailableError)
