"""Formatting and drawing utility helpers."""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional, Protocol

from dateutil import parser as dateutil_parser

from .calculations import round_money

CURRENCY_SYMBOL = "€"


class TextWidthProvider(Protocol):
    def text_width(self, text: str, size: float, bold: bool = False) -> float:
        ...


class PdfPathCanvas(Protocol):
    k: float
    h: float

    def rect(self, x: float, y: float, w: float, h: float, style: str) -> None:
        ...

    def _out(self, value: str) -> None:
        ...


def fmt_money(amount: Decimal, symbol: str = CURRENCY_SYMBOL) -> str:
    """Render an amount as '€12,34': rounded half-up, comma as decimal separator."""
    return f"{symbol}{round_money(amount):.2f}".replace(".", ",")


def fmt_qty(qty: Any) -> str:
    try:
        quantity = Decimal(str(qty))
    except InvalidOperation:
        return str(qty)
    if quantity == quantity.to_integral_value():
        return str(int(quantity))
    return str(quantity.normalize())


def to_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def parse_date(raw: str) -> date:
    """Parse a user-supplied date; raises ValueError when it is not a date."""
    try:
        return dateutil_parser.parse(raw.strip()).date()
    except OverflowError as exc:
        raise ValueError(f"Date out of range: {raw}") from exc


def fmt_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def split_lines(text: str) -> List[str]:
    if not text:
        return []
    return [line for line in text.split("\n") if line.strip() != ""]


def wrap_text(
    fonts_obj: TextWidthProvider,
    text: str,
    max_width: float,
    font_size: float,
    bold: bool = False,
) -> List[str]:
    def line_width(value: str) -> float:
        return fonts_obj.text_width(value, font_size, bold=bold)

    def wrap_paragraph(paragraph: str) -> List[str]:
        words = paragraph.split()
        if not words:
            return []

        lines: List[str] = []
        current = ""
        for word in words:
            candidate = word if not current else f"{current} {word}"
            if line_width(candidate) <= max_width:
                current = candidate
                continue

            if current:
                lines.append(current)
                current = ""

            # Words wider than the column are split by character.
            chunk = ""
            for char in word:
                if chunk and line_width(chunk + char) > max_width:
                    lines.append(chunk)
                    chunk = char
                else:
                    chunk += char
            current = chunk

        if current:
            lines.append(current)
        return lines

    result: List[str] = []
    for paragraph in text.split("\n"):
        result.extend(wrap_paragraph(paragraph))
    return result if result else [text.strip()]


def round_rect(
    pdf: PdfPathCanvas,
    x: float,
    y: float,
    width: float,
    height: float,
    radius: float,
) -> None:
    radius = max(0.0, min(radius, width / 2.0, height / 2.0))
    if radius == 0:
        pdf.rect(x, y, width, height, "F")
        return

    k = pdf.k
    hp = pdf.h
    kappa = 0.5522847498307936  # bezier approximation of a quarter circle

    def point(px: float, py: float) -> str:
        return "%.2f %.2f" % (px * k, (hp - py) * k)

    def arc(x1: float, y1: float, x2: float, y2: float, x3: float, y3: float) -> None:
        pdf._out(f"{point(x1, y1)} {point(x2, y2)} {point(x3, y3)} c")

    offset = radius * kappa
    right = x + width
    bottom = y + height

    pdf._out(f"{point(x + radius, y)} m")
    pdf._out(f"{point(right - radius, y)} l")
    arc(right - radius + offset, y, right, y + radius - offset, right, y + radius)
    pdf._out(f"{point(right, bottom - radius)} l")
    arc(right, bottom - radius + offset, right - radius + offset, bottom, right - radius, bottom)
    pdf._out(f"{point(x + radius, bottom)} l")
    arc(x + radius - offset, bottom, x, bottom - radius + offset, x, bottom - radius)
    pdf._out(f"{point(x, y + radius)} l")
    arc(x, y + radius - offset, x + radius - offset, y, x + radius, y)
    pdf._out("f")
