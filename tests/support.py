from datetime import date
from decimal import Decimal
from typing import Any, Dict

from invoice_mailer.document import InvoiceDocument, build_document
from invoice_mailer.rendering import RenderedDocument
from invoice_mailer.validation import validate_order

TODAY = date(2026, 1, 15)


def sample_payload(**overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "to": "j@example.com",
        "customer_name": "Jonas Jonaitis",
        "customer_email": "j@example.com",
        "payment_reference": "ORD-1",
        "invoice_number": "100",
        "products": [{"name": "Kremas", "quantity": 2, "price": 10}],
    }
    payload.update(overrides)
    return payload


def sample_document(**overrides: Any) -> InvoiceDocument:
    return build_document(validate_order(sample_payload(**overrides), today=TODAY))


def sample_rendered() -> RenderedDocument:
    return RenderedDocument(
        html="<p>Sąskaita</p>",
        text="Sąskaita",
        pdf=b"%PDF-1.4 test",
        filename="saskaita-EVA100.pdf",
    )


class FakeFonts:
    """Monospaced measurer: every character is half the font size wide."""

    def text_width(self, text: str, size: float, bold: bool = False) -> float:
        return len(text) * size * 0.5


def money(value: str) -> Decimal:
    return Decimal(value)
