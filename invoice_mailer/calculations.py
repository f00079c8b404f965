"""VAT arithmetic for invoices.

Amounts are kept as full-precision ``Decimal`` values and only rounded when
they are displayed, so per-line rounding never compounds into the totals.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Tuple

from .models import LineItem

VAT_RATE = Decimal("0.21")
INVOICE_NUMBER_PREFIX = "EVA"
TOTAL_TOLERANCE = Decimal("0.01")

_CENTS = Decimal("0.01")


def round_money(value: Decimal) -> Decimal:
    return value.quantize(_CENTS, rounding=ROUND_HALF_UP)


def display_invoice_number(raw: str) -> str:
    return f"{INVOICE_NUMBER_PREFIX}{raw}"


@dataclass(frozen=True)
class InvoiceLine:
    name: str
    quantity: int
    unit_price: Decimal

    @property
    def net(self) -> Decimal:
        return self.quantity * self.unit_price

    @property
    def vat(self) -> Decimal:
        return self.net * VAT_RATE

    @property
    def gross(self) -> Decimal:
        return self.net * (1 + VAT_RATE)


@dataclass(frozen=True)
class Invoice:
    lines: Tuple[InvoiceLine, ...]
    net_total: Decimal
    vat_total: Decimal
    gross_total: Decimal

    def rounded_totals(self) -> Tuple[Decimal, Decimal, Decimal]:
        return (
            round_money(self.net_total),
            round_money(self.vat_total),
            round_money(self.gross_total),
        )


def calculate_invoice(products: Iterable[LineItem]) -> Invoice:
    lines = tuple(
        InvoiceLine(name=item.name, quantity=item.quantity, unit_price=item.price)
        for item in products
    )
    net_total = sum((line.net for line in lines), Decimal("0"))
    vat_total = net_total * VAT_RATE
    return Invoice(
        lines=lines,
        net_total=net_total,
        vat_total=vat_total,
        gross_total=net_total + vat_total,
    )


def total_mismatch(invoice: Invoice, client_total: Optional[Decimal]) -> Optional[Decimal]:
    """Difference between a client-supplied gross total and the computed one, if it matters."""
    if client_total is None:
        return None
    difference = client_total - round_money(invoice.gross_total)
    if abs(difference) > TOTAL_TOLERANCE:
        return difference
    return None
