"""Everything printed on an invoice, independent of the output format."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Tuple

from .calculations import VAT_RATE, Invoice, calculate_invoice, display_invoice_number
from .config import SELLER_DETAILS, SELLER_NAME
from .formatting import fmt_date
from .models import OrderRequest, address_lines

TITLE = "Sąskaita faktūra"
LABEL_DATE = "Data"
LABEL_REFERENCE = "Užsakymo Nr."
LABEL_NUMBER = "Sąskaitos Nr."
LABEL_SELLER = "Pardavėjas"
LABEL_BUYER = "Pirkėjas"
LABEL_PRODUCTS = "Produktai"
LABEL_NET = "Suma be PVM"
LABEL_VAT = f"PVM ({int(VAT_RATE * 100)}%)"
LABEL_GROSS = "Bendra suma"
TABLE_HEADERS = ("Pavadinimas", "Kiekis", "Kaina be PVM", "PVM", "Suma su PVM")


@dataclass(frozen=True)
class InvoiceDocument:
    order: OrderRequest
    invoice: Invoice
    seller_name: str = SELLER_NAME
    seller_details: Tuple[str, ...] = field(default=SELLER_DETAILS)

    @property
    def number(self) -> str:
        return display_invoice_number(self.order.invoice_number)

    @property
    def issued_on(self) -> date:
        return self.order.issued_on

    @property
    def filename(self) -> str:
        return f"saskaita-{self.number}.pdf"

    def metadata(self) -> List[Tuple[str, str]]:
        return [
            (LABEL_DATE, fmt_date(self.issued_on)),
            (LABEL_REFERENCE, self.order.payment_reference),
            (LABEL_NUMBER, self.number),
        ]

    def metadata_line(self) -> str:
        return "   ".join(f"{label}: {value}" for label, value in self.metadata())

    def buyer_lines(self) -> List[str]:
        order = self.order
        lines = [order.customer_name]
        lines.extend(address_lines(order.shipping_address))
        lines.append(order.customer_email)
        if order.phone:
            lines.append(f"Tel.: {order.phone}")
        if order.delivery_method:
            lines.append(f"Pristatymas: {order.delivery_method}")
        return lines


def build_document(order: OrderRequest) -> InvoiceDocument:
    return InvoiceDocument(order=order, invoice=calculate_invoice(order.products))
