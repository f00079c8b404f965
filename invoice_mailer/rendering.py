"""Turning an invoice document into deliverable content."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .assets import InvoiceAssets
from .browser import BrowserPdfConverter
from .config import LAYOUT_BROWSER_PDF, LAYOUT_TABLE, LAYOUTS
from .document import InvoiceDocument
from .errors import RenderError
from .html_invoice import render_invoice_html, render_invoice_text


@dataclass(frozen=True)
class RenderedDocument:
    html: str
    text: str
    pdf: bytes
    filename: str


def render_document(
    document: InvoiceDocument,
    layout: str = LAYOUT_TABLE,
    assets: Optional[InvoiceAssets] = None,
    converter: Optional[BrowserPdfConverter] = None,
) -> RenderedDocument:
    if layout not in LAYOUTS:
        raise RenderError(f"Unknown layout: {layout}")
    assets = assets or InvoiceAssets()

    try:
        html = render_invoice_html(document, assets.logo_src)
        if layout == LAYOUT_BROWSER_PDF:
            pdf_bytes = (converter or BrowserPdfConverter()).convert(html)
        else:
            from .pdf import render_pdf

            pdf_bytes = render_pdf(document, layout, assets)
    except RenderError:
        raise
    except Exception as exc:
        raise RenderError(f"Invoice rendering failed: {exc}") from exc

    return RenderedDocument(
        html=html,
        text=render_invoice_text(document),
        pdf=pdf_bytes,
        filename=document.filename,
    )
