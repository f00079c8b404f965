"""Checking order payloads before any rendering or email work is done."""

from __future__ import annotations

import json
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from .errors import OrderValidationError
from .formatting import parse_date, to_decimal
from .models import Address, LineItem, OrderRequest, StructuredAddress

ErrorResponse = Tuple[int, Dict[str, Any]]

REQUIRED_FIELDS = ("customer_name", "customer_email", "payment_reference", "invoice_number")
ADDRESS_FIELDS = ("company", "street", "city", "postal_code", "country")
# Values that end up in mail headers or the attachment filename.
SINGLE_LINE_FIELDS = ("to", "customer_email", "payment_reference", "invoice_number")

# Largest decimal exponent accepted (quantity < 10**7, amounts < 10**10).
MAX_QUANTITY_EXPONENT = 6
MAX_AMOUNT_EXPONENT = 9


def parse_order_payload(body: bytes) -> Tuple[Optional[Dict[str, Any]], Optional[ErrorResponse]]:
    try:
        payload = json.loads(body.decode("utf-8"))
    except UnicodeDecodeError:
        return None, (400, {"error": "Body must be UTF-8 encoded JSON."})
    except json.JSONDecodeError as exc:
        return None, (400, {"error": f"Invalid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})"})

    if not isinstance(payload, dict):
        return None, (400, {"error": "JSON root must be an object."})
    return payload, None


def _text(payload: Dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def _has_control_chars(value: str) -> bool:
    return any(ord(char) < 32 or ord(char) == 127 for char in value)


def _bounded(number: Optional[Decimal], max_exponent: int) -> Optional[Decimal]:
    if number is None or number.adjusted() > max_exponent:
        return None
    return number


def _quantity(value: Any) -> Optional[int]:
    number = _bounded(to_decimal(value), MAX_QUANTITY_EXPONENT)
    if number is None or number <= 0 or number != number.to_integral_value():
        return None
    return int(number)


def clean_products(raw: Any) -> List[LineItem]:
    """Keep entries with a name, a positive whole quantity and a non-negative price."""
    if not isinstance(raw, list):
        return []

    products: List[LineItem] = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        name = _text(entry, "name")
        quantity = _quantity(entry.get("quantity"))
        price = _bounded(to_decimal(entry.get("price")), MAX_AMOUNT_EXPONENT)
        if not name or quantity is None or price is None or price < 0:
            continue
        products.append(LineItem(name=name, quantity=quantity, price=price))
    return products


def parse_address(raw: Any) -> Optional[Address]:
    if raw is None:
        return None
    if isinstance(raw, str):
        return raw.strip() or None
    if isinstance(raw, dict):
        unknown = sorted(set(raw) - set(ADDRESS_FIELDS))
        if unknown:
            raise OrderValidationError(f"Unknown shipping_address fields: {', '.join(unknown)}")
        fields = {}
        for key in ADDRESS_FIELDS:
            value = raw.get(key)
            if value is not None and not isinstance(value, str):
                raise OrderValidationError(f"shipping_address.{key} must be a string")
            fields[key] = (value or "").strip()
        address = StructuredAddress(**fields)
        return address if address.lines() else None
    raise OrderValidationError("shipping_address must be a string or an object")


def parse_issue_date(raw: Any, today: Optional[date] = None) -> date:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return today or date.today()
    if not isinstance(raw, str):
        raise OrderValidationError("date must be a string")
    try:
        return parse_date(raw)
    except ValueError as exc:
        raise OrderValidationError(f"Invalid date: {raw}") from exc


def validate_order(payload: Dict[str, Any], today: Optional[date] = None) -> OrderRequest:
    customer_email = _text(payload, "customer_email")
    recipient = _text(payload, "to") or customer_email
    if not recipient:
        raise OrderValidationError("Missing recipient email (to)")

    missing = [key for key in REQUIRED_FIELDS if not _text(payload, key)]
    if missing:
        raise OrderValidationError(f"Missing required fields: {', '.join(missing)}")

    for key in SINGLE_LINE_FIELDS:
        if _has_control_chars(_text(payload, key)):
            raise OrderValidationError(f"{key} must be a single line of text")

    products = clean_products(payload.get("products"))
    if not products:
        raise OrderValidationError("No valid products")

    client_total: Optional[Decimal] = None
    if payload.get("total_price") not in (None, ""):
        client_total = _bounded(to_decimal(payload.get("total_price")), MAX_AMOUNT_EXPONENT)
        if client_total is None:
            raise OrderValidationError("total_price must be a number below 10^10")

    return OrderRequest(
        recipient=recipient,
        customer_name=_text(payload, "customer_name"),
        customer_email=customer_email,
        payment_reference=_text(payload, "payment_reference"),
        invoice_number=_text(payload, "invoice_number"),
        products=tuple(products),
        issued_on=parse_issue_date(payload.get("date"), today),
        phone=_text(payload, "phone"),
        delivery_method=_text(payload, "delivery_method"),
        shipping_address=parse_address(payload.get("shipping_address")),
        client_total=client_total,
    )
