"""
PDF receipts for recorded payments.

ReceiptRenderer.render() turns one success TransactionRecord into a PDF.
It reads nothing but the record and settings, so a record fetched back
from the ledger renders exactly as the one returned by
ReconciliationService.

Layout (fixed):
    title
    issuing department
    key/value table: Receipt No, Date, Student Name, Matric Number, Level,
                     Payment Type, Amount, Status
    disclaimer

The document is built in reportlab's invariant mode, so rendering the
same record twice produces identical bytes.

Configuration (via settings):
- RECEIPT_TITLE, RECEIPT_ISSUER, RECEIPT_DISCLAIMER: Fixed text
- RECEIPT_FILENAME_PREFIX: Filename is <prefix>_Receipt_<reference>.pdf
- RECEIPT_FONT_PATH: Optional TTF file; the built-in Helvetica has no
  naira sign, so set this to a font that does
- PAYMENTS_CURRENCY_SYMBOL: Symbol prefixed to amounts. Without a
  RECEIPT_FONT_PATH, a symbol Helvetica cannot draw is replaced by
  PAYMENTS_CURRENCY ("NGN 2,500")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from io import BytesIO
from typing import TYPE_CHECKING
from xml.sax.saxutils import escape

from django.conf import settings
from django.utils import timezone
from django.utils.text import get_valid_filename
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from payments.exceptions import PaymentValidationError
from payments.models import TransactionStatus

if TYPE_CHECKING:
    from payments.models import TransactionRecord

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
RECEIPT_FONT_NAME = "ReceiptFont"
DATE_FORMAT = "%d/%m/%Y"


@dataclass(frozen=True)
class ReceiptDocument:
    """
    A rendered receipt.

    Attributes:
        filename: Download name, unique per gateway reference
        content: PDF bytes
        content_type: MIME type
        fields: The (label, value) rows printed on the receipt
    """

    filename: str
    content: bytes
    content_type: str
    fields: tuple[tuple[str, str], ...]


def format_amount(amount: int, symbol: str | None = None) -> str:
    """'₦2,500' style amount with thousands separators."""
    if symbol is None:
        symbol = getattr(settings, "PAYMENTS_CURRENCY_SYMBOL", "₦")
    return f"{symbol}{amount:,}"


@lru_cache(maxsize=4)
def _register_font(path: str) -> str:
    pdfmetrics.registerFont(TTFont(RECEIPT_FONT_NAME, path))
    return RECEIPT_FONT_NAME


class ReceiptRenderer:
    """
    Renders receipts for success records.

    Usage:
        document = ReceiptRenderer.render(record)
        response = HttpResponse(document.content, content_type=document.content_type)
    """

    @staticmethod
    def currency_symbol() -> str:
        """Currency prefix the receipt font can actually draw."""
        symbol = getattr(settings, "PAYMENTS_CURRENCY_SYMBOL", "₦")
        if getattr(settings, "RECEIPT_FONT_PATH", ""):
            return symbol
        # Helvetica only covers WinAnsi (cp1252)
        try:
            symbol.encode("cp1252")
        except UnicodeEncodeError:
            return f"{getattr(settings, 'PAYMENTS_CURRENCY', 'NGN')} "
        return symbol

    @staticmethod
    def filename_for(record: TransactionRecord) -> str:
        prefix = getattr(settings, "RECEIPT_FILENAME_PREFIX", "NACOS")
        return get_valid_filename(f"{prefix}_Receipt_{record.gateway_reference}.pdf")

    @staticmethod
    def receipt_fields(record: TransactionRecord) -> tuple[tuple[str, str], ...]:
        created = record.created_at
        if timezone.is_aware(created):
            created = timezone.localtime(created)
        return (
            ("Receipt No:", record.gateway_reference),
            ("Date:", created.strftime(DATE_FORMAT)),
            ("Student Name:", record.member_name),
            ("Matric Number:", record.matric_number),
            ("Level:", (record.level or "").upper()),
            ("Payment Type:", record.payment_type),
            ("Amount:", format_amount(record.amount, ReceiptRenderer.currency_symbol())),
            ("Status:", record.status.upper()),
        )

    @classmethod
    def render(cls, record: TransactionRecord) -> ReceiptDocument:
        """
        Render a receipt.

        Raises:
            PaymentValidationError: If the record is not a success record
        """
        if record.status != TransactionStatus.SUCCESS:
            raise PaymentValidationError(
                "Receipts are only available for successful payments",
                error_code="RECEIPT_NOT_AVAILABLE",
                details={"reference": record.gateway_reference, "status": record.status},
            )

        fields = cls.receipt_fields(record)
        content = cls._build_pdf(fields)

        logger.info(
            "Receipt rendered",
            extra={"reference": record.gateway_reference, "size_bytes": len(content)},
        )
        return ReceiptDocument(
            filename=cls.filename_for(record),
            content=content,
            content_type=PDF_CONTENT_TYPE,
            fields=fields,
        )

    @staticmethod
    def _fonts() -> tuple[str, str]:
        font_path = getattr(settings, "RECEIPT_FONT_PATH", "")
        if font_path:
            name = _register_font(font_path)
            return name, name
        return "Helvetica", "Helvetica-Bold"

    @classmethod
    def _build_pdf(cls, fields: tuple[tuple[str, str], ...]) -> bytes:
        regular, bold = cls._fonts()
        title = getattr(settings, "RECEIPT_TITLE", "NACOS Payment Receipt")
        issuer = getattr(settings, "RECEIPT_ISSUER", "Department of Computer Science")
        disclaimer = getattr(
            settings,
            "RECEIPT_DISCLAIMER",
            "This is a computer-generated receipt and does not require a signature.",
        )

        title_style = ParagraphStyle(
            "ReceiptTitle", fontName=bold, fontSize=20, leading=24, alignment=TA_CENTER
        )
        issuer_style = ParagraphStyle(
            "ReceiptIssuer", fontName=regular, fontSize=12, leading=16, alignment=TA_CENTER
        )
        footer_style = ParagraphStyle(
            "ReceiptFooter",
            fontName=regular,
            fontSize=10,
            leading=14,
            alignment=TA_CENTER,
            textColor=colors.grey,
        )

        table = Table([list(row) for row in fields], colWidths=[45 * mm, 95 * mm])
        table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (0, -1), bold),
                    ("FONTNAME", (1, 0), (1, -1), regular),
                    ("FONTSIZE", (0, 0), (-1, -1), 12),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                    ("TOPPADDING", (0, 0), (-1, -1), 6),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ]
            )
        )

        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            topMargin=20 * mm,
            bottomMargin=20 * mm,
            title=title,
            author=issuer,
            creator=issuer,
            invariant=1,
        )
        doc.build(
            [
                Paragraph(escape(title), title_style),
                Spacer(1, 4 * mm),
                Paragraph(escape(issuer), issuer_style),
                Spacer(1, 10 * mm),
                table,
                Spacer(1, 15 * mm),
                Paragraph(escape(disclaimer), footer_style),
            ]
        )
        return buffer.getvalue()
