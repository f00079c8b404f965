"""Public package API for order invoices."""

from __future__ import annotations

from typing import Any, Dict

from .calculations import VAT_RATE, calculate_invoice, display_invoice_number
from .errors import AssetFetchError, InvoiceError, OrderValidationError, RenderError, TransportError
from .validation import validate_order


def process_order(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Validate, render and email one order with the process-wide service."""
    from .server import get_service

    return get_service().process(payload).to_response()


def run(host: str = "0.0.0.0", port: int = 8080) -> None:
    from .server import run as _run

    _run(host, port)


__all__ = [
    "AssetFetchError",
    "InvoiceError",
    "OrderValidationError",
    "RenderError",
    "TransportError",
    "VAT_RATE",
    "calculate_invoice",
    "display_invoice_number",
    "process_order",
    "run",
    "validate_order",
]
