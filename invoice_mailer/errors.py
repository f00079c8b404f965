"""Exception types raised while turning an order into an emailed invoice."""

from __future__ import annotations


class InvoiceError(Exception):
    """Base class for order processing failures."""


class OrderValidationError(InvoiceError):
    """Raised when an order payload is missing data or has no usable products."""


class AssetFetchError(InvoiceError):
    """Raised when a decorative asset (logo, font) cannot be loaded."""


class RenderError(InvoiceError):
    """Raised when the invoice document cannot be produced."""


class TransportError(InvoiceError):
    """Raised when the invoice email cannot be delivered."""
