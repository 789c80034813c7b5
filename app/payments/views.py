"""
DRF views for payments app.

This module provides API views for:
- Fee catalog with paid/deadline flags
- Checkout start and gateway callback
- Dashboard and transaction history
- Receipt download

Related files:
    - services/: Initiation, reconciliation, dashboard
    - receipts.py: ReceiptRenderer
    - serializers.py: Request/response serializers
    - urls.py: URL routing

Endpoints:
    GET /api/v1/payments/fees/ - Fee catalog for the current member
    POST /api/v1/payments/checkout/ - Start a checkout
    POST /api/v1/payments/callback/ - Report the gateway outcome
    GET /api/v1/payments/dashboard/ - Dashboard read model
    GET /api/v1/payments/transactions/ - Transactions, newest first
    GET /api/v1/payments/transactions/<reference>/receipt/ - PDF receipt

Security:
    - All endpoints require authentication
    - A member can only complete, cancel or download their own payments
    - With PAYSTACK_VERIFY_CALLBACKS on, a reported success is confirmed
      with Paystack before anything is recorded
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.http import HttpResponse
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import BaseApplicationError
from payments.adapters import GatewayResult, PaystackAdapter
from payments.catalog import get_fee_catalog
from payments.exceptions import (
    AlreadyPaidError,
    DuplicatePaymentError,
    FeeItemNotFound,
    GatewayError,
    PaymentValidationError,
    RecordingError,
)
from payments.ledger import DjangoLedgerStore, LedgerReadError
from payments.receipts import ReceiptRenderer
from payments.serializers import (
    CheckoutRequestSerializer,
    CheckoutSessionSerializer,
    DashboardSerializer,
    PaymentCallbackSerializer,
    PaymentOptionSerializer,
    TransactionRecordSerializer,
)
from payments.services import DashboardService, PaymentInitiationService

logger = logging.getLogger(__name__)


def error_response(exc: BaseApplicationError) -> Response:
    """Map a payment exception to its HTTP status."""
    if isinstance(exc, (DuplicatePaymentError, AlreadyPaidError)):
        code = status.HTTP_409_CONFLICT
    elif isinstance(exc, FeeItemNotFound):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, PaymentValidationError):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, (RecordingError, GatewayError)):
        code = status.HTTP_502_BAD_GATEWAY
    elif isinstance(exc, LedgerReadError):
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        code = status.HTTP_400_BAD_REQUEST
    return Response(exc.to_dict(), status=code)


class FeeCatalogView(APIView):
    """
    Fee catalog for the current member.

    GET /api/v1/payments/fees/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List fee items",
        tags=["Payments"],
        responses={200: PaymentOptionSerializer(many=True)},
    )
    def get(self, request):
        dashboard = DashboardService.get_dashboard(request.user)
        return Response(PaymentOptionSerializer(dashboard.payment_options, many=True).data)


class CheckoutView(APIView):
    """
    Start a checkout for one fee item.

    POST /api/v1/payments/checkout/

    Request body:
        {"fee_item_id": "departmental-fee"}

    Returns:
        201 with the gateway request fields and, when available, the
        Paystack authorization URL
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Start checkout",
        tags=["Payments"],
        request=CheckoutRequestSerializer,
        responses={201: CheckoutSessionSerializer},
    )
    def post(self, request):
        serializer = CheckoutRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            fee_item = get_fee_catalog().get(serializer.validated_data["fee_item_id"])
            session = PaymentInitiationService.start_checkout(request.user, fee_item)
        except (PaymentValidationError, GatewayError) as e:
            return error_response(e)

        return Response(CheckoutSessionSerializer(session).data, status=status.HTTP_201_CREATED)


class PaymentCallbackView(APIView):
    """
    Report the gateway outcome for a checkout.

    POST /api/v1/payments/callback/

    Request body:
        {"reference": "DUES-...", "status": "success"}
        {"reference": "DUES-...", "status": "cancelled"}

    Returns:
        201 with the stored record on success
        200 on cancel
        409 if the fee item was already paid (the new payment needs a refund)
        502 if the payment could not be recorded; the body carries the
            reference and what to tell support
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Gateway callback",
        tags=["Payments"],
        request=PaymentCallbackSerializer,
        responses={201: TransactionRecordSerializer},
    )
    def post(self, request):
        serializer = PaymentCallbackSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        reference = serializer.validated_data["reference"]

        if serializer.validated_data["status"] == PaymentCallbackSerializer.STATUS_CANCELLED:
            result = PaymentInitiationService.cancel(reference, member=request.user)
            code = status.HTTP_200_OK if result else status.HTTP_400_BAD_REQUEST
            return Response(result.to_response(), status=code)

        try:
            gateway_result = self._gateway_result(reference, serializer.validated_data)
            record = PaymentInitiationService.complete(
                reference, gateway_result, member=request.user
            )
        except RecordingError as e:
            logger.error(
                "Payment callback could not be recorded",
                extra={"reference": e.reference, "error_code": e.error_code},
            )
            return error_response(e)
        except (PaymentValidationError, GatewayError) as e:
            return error_response(e)

        return Response(TransactionRecordSerializer(record).data, status=status.HTTP_201_CREATED)

    @staticmethod
    def _gateway_result(reference, data) -> GatewayResult:
        if getattr(settings, "PAYSTACK_VERIFY_CALLBACKS", False):
            return PaystackAdapter.verify_transaction(reference)
        return GatewayResult(reference=reference, status="success", amount=data.get("amount"))


class DashboardView(APIView):
    """
    Dashboard read model.

    GET /api/v1/payments/dashboard/

    A ledger read failure still returns 200, with no transactions and an
    ``error`` message.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Get dashboard", tags=["Payments"], responses={200: DashboardSerializer})
    def get(self, request):
        dashboard = DashboardService.get_dashboard(request.user)
        return Response(DashboardSerializer(dashboard).data)


class TransactionListView(APIView):
    """
    Current member's transactions, newest first.

    GET /api/v1/payments/transactions/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List transactions",
        tags=["Payments"],
        responses={200: TransactionRecordSerializer(many=True)},
    )
    def get(self, request):
        try:
            records = DjangoLedgerStore().query_by_member(request.user.pk)
        except LedgerReadError as e:
            return error_response(e)

        records.sort(key=lambda record: record.created_at, reverse=True)
        return Response(TransactionRecordSerializer(records, many=True).data)


class ReceiptView(APIView):
    """
    Download the PDF receipt for one of the member's payments.

    GET /api/v1/payments/transactions/<reference>/receipt/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Download receipt",
        tags=["Payments"],
        responses={(200, "application/pdf"): OpenApiTypes.BINARY},
    )
    def get(self, request, reference):
        try:
            record = DjangoLedgerStore().get_by_reference(reference)
        except LedgerReadError as e:
            return error_response(e)

        if record is None or record.member_id != request.user.pk:
            return Response(
                {"error": "Transaction not found", "error_code": "TRANSACTION_NOT_FOUND"},
                status=status.HTTP_404_NOT_FOUND,
            )

        try:
            document = ReceiptRenderer.render(record)
        except PaymentValidationError as e:
            return error_response(e)

        response = HttpResponse(document.content, content_type=document.content_type)
        response["Content-Disposition"] = f'attachment; filename="{document.filename}"'
        return response
