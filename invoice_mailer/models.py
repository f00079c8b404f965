"""Order data accepted by the invoice endpoint."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple, Union


@dataclass(frozen=True)
class LineItem:
    name: str
    quantity: int
    price: Decimal  # unit price excluding VAT


@dataclass(frozen=True)
class StructuredAddress:
    company: str = ""
    street: str = ""
    city: str = ""
    postal_code: str = ""
    country: str = ""

    def lines(self) -> List[str]:
        locality = " ".join(part for part in (self.postal_code, self.city) if part)
        return [line for line in (self.company, self.street, locality, self.country) if line]


# A shipping address is either free text or a structured object, never both.
Address = Union[str, StructuredAddress]


def address_lines(address: Optional[Address]) -> List[str]:
    if address is None:
        return []
    if isinstance(address, StructuredAddress):
        return address.lines()
    return [line.strip() for line in address.split("\n") if line.strip()]


@dataclass(frozen=True)
class OrderRequest:
    recipient: str
    customer_name: str
    customer_email: str
    payment_reference: str
    invoice_number: str
    products: Tuple[LineItem, ...]
    issued_on: date
    phone: str = ""
    delivery_method: str = ""
    shipping_address: Optional[Address] = None
    client_total: Optional[Decimal] = None
