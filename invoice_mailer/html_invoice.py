"""Semantic HTML rendition of an invoice.

The same document is used as the email body and as the input of the
browser-based PDF conversion, so all styling is inline.
"""

from __future__ import annotations

from html import escape
from typing import List, Optional

from .document import (
    LABEL_BUYER,
    LABEL_GROSS,
    LABEL_NET,
    LABEL_SELLER,
    LABEL_VAT,
    TABLE_HEADERS,
    TITLE,
    InvoiceDocument,
)
from .formatting import fmt_money, fmt_qty

BRAND = "#d81b60"


def _lines(lines: List[str]) -> str:
    return "<br/>".join(escape(line) for line in lines)


def _party(label: str, lines: List[str]) -> str:
    return (
        '<td style="width:50%;vertical-align:top;padding:0 12px 0 0;font-size:13px;line-height:1.6">'
        f'<div style="color:#696969;font-weight:700;font-size:12px">{escape(label)}:</div>'
        f"<strong>{escape(lines[0])}</strong>"
        + (f"<br/>{_lines(lines[1:])}" if len(lines) > 1 else "")
        + "</td>"
    )


def _product_rows(document: InvoiceDocument) -> str:
    rows = []
    for index, line in enumerate(document.invoice.lines):
        shade = "background:#faf7f8;" if index % 2 == 1 else ""
        rows.append(
            f'<tr style="{shade}">'
            f'<td style="padding:8px;text-align:left">{escape(line.name)}</td>'
            f'<td style="padding:8px;text-align:right">{fmt_qty(line.quantity)}</td>'
            f'<td style="padding:8px;text-align:right;white-space:nowrap">{fmt_money(line.unit_price)}</td>'
            f'<td style="padding:8px;text-align:right;white-space:nowrap">{fmt_money(line.vat)}</td>'
            f'<td style="padding:8px;text-align:right;white-space:nowrap">{fmt_money(line.gross)}</td>'
            "</tr>"
        )
    return "".join(rows)


def render_invoice_html(document: InvoiceDocument, logo_src: Optional[str] = None) -> str:
    net, vat, gross = document.invoice.rounded_totals()
    logo = (
        f'<img src="{escape(logo_src)}" alt="" style="height:64px;border-radius:10px"/>'
        if logo_src
        else ""
    )
    metadata = " &nbsp; ".join(
        f"<span>{escape(label)}: <strong>{escape(value)}</strong></span>"
        for label, value in document.metadata()
    )
    header_cells = "".join(
        f'<th style="padding:8px;text-align:{"left" if index == 0 else "right"}">{escape(label)}</th>'
        for index, label in enumerate(TABLE_HEADERS)
    )

    return (
        "<!DOCTYPE html>"
        '<html lang="lt"><head><meta charset="UTF-8"/>'
        f"<title>{escape(TITLE)} {escape(document.number)}</title></head>"
        '<body style="font-family:\'Segoe UI\',Arial,sans-serif;color:#333;background:#fff;margin:0;padding:32px">'
        '<div style="max-width:760px;margin:auto">'
        '<table style="width:100%;border-collapse:collapse"><tr>'
        f'<td style="text-align:left">{logo}</td>'
        f'<td style="text-align:right"><h1 style="color:{BRAND};margin:0;font-size:26px">{escape(TITLE)}</h1></td>'
        "</tr></table>"
        f'<p style="color:#696969;font-size:13px;margin:16px 0">{metadata}</p>'
        '<table style="width:100%;border-collapse:collapse;margin-bottom:20px"><tr>'
        f"{_party(LABEL_SELLER, [document.seller_name, *document.seller_details])}"
        f"{_party(LABEL_BUYER, document.buyer_lines())}"
        "</tr></table>"
        '<table class="products" style="width:100%;border-collapse:collapse;font-size:13px">'
        f'<thead><tr style="background:#3a3a3a;color:#eaeaea">{header_cells}</tr></thead>'
        f"<tbody>{_product_rows(document)}</tbody>"
        "</table>"
        '<table class="totals" style="margin:16px 0 0 auto;border-collapse:collapse;font-size:14px">'
        f'<tr><td style="padding:4px 12px;color:#696969">{escape(LABEL_NET)}:</td>'
        f'<td class="net" style="padding:4px 0;text-align:right">{fmt_money(net)}</td></tr>'
        f'<tr><td style="padding:4px 12px;color:#696969">{escape(LABEL_VAT)}:</td>'
        f'<td class="vat" style="padding:4px 0;text-align:right">{fmt_money(vat)}</td></tr>'
        f'<tr style="border-top:1px solid #ddd;color:{BRAND};font-weight:700;font-size:16px">'
        f'<td style="padding:8px 12px">{escape(LABEL_GROSS)}:</td>'
        f'<td class="gross" style="padding:8px 0;text-align:right">{fmt_money(gross)}</td></tr>'
        "</table>"
        "</div></body></html>"
    )


def render_invoice_text(document: InvoiceDocument) -> str:
    """Plain-text alternative for mail clients without HTML."""
    net, vat, gross = document.invoice.rounded_totals()
    lines = [f"{TITLE} {document.number}", document.metadata_line(), ""]
    for line in document.invoice.lines:
        lines.append(f"- {line.name} x {fmt_qty(line.quantity)}: {fmt_money(line.gross)}")
    lines.extend(
        [
            "",
            f"{LABEL_NET}: {fmt_money(net)}",
            f"{LABEL_VAT}: {fmt_money(vat)}",
            f"{LABEL_GROSS}: {fmt_money(gross)}",
        ]
    )
    return "\n".join(lines)
