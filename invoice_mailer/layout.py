"""Positioned content blocks for PDF invoices.

Layouts only decide where things go. They measure text through a
``TextWidthProvider`` and emit blocks that ``pdf.PdfCanvas`` draws, so the
geometry can be inspected without producing a PDF.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from .calculations import InvoiceLine
from .config import LAYOUT_SIMPLE_TEXT, LAYOUT_TABLE
from .document import (
    LABEL_BUYER,
    LABEL_GROSS,
    LABEL_NET,
    LABEL_PRODUCTS,
    LABEL_SELLER,
    LABEL_VAT,
    TABLE_HEADERS,
    TITLE,
    InvoiceDocument,
)
from .formatting import TextWidthProvider, fmt_money, fmt_qty, wrap_text
from .pagination import paginate_rows
from .pdf_constants import (
    ASCENT,
    BAR_RADIUS,
    CELL_PAD_X,
    CELL_PAD_Y,
    COLOR_BAR,
    COLOR_BAR_TEXT,
    COLOR_BRAND,
    COLOR_MUTED,
    COLOR_ROW_SHADE,
    COLOR_RULE,
    COLOR_TEXT,
    COLUMN_GAP,
    COLUMN_WEIGHTS,
    CONTENT_RIGHT,
    CONTENT_W,
    FONT_SIZE_NORMAL,
    FONT_SIZE_SMALL,
    FONT_SIZE_TITLE,
    FONT_SIZE_TOTAL,
    HEADER_GAP,
    LINE_H,
    LOGO_H,
    MARGIN_TOP,
    MARGIN_X,
    PAGE_BOTTOM,
    PAGE_W,
    RULE_W,
    SECTION_GAP,
    SMALL_LINE_H,
    TABLE_HEADER_H,
    TOTAL_LINE_H,
)

Color = Tuple[int, int, int]


@dataclass(frozen=True)
class TextBlock:
    x: float
    y: float  # baseline
    text: str
    size: float
    color: Color
    bold: bool = False


@dataclass(frozen=True)
class RectBlock:
    x: float
    y: float
    width: float
    height: float
    color: Color
    radius: float = 0.0


@dataclass(frozen=True)
class LineBlock:
    x1: float
    y1: float
    x2: float
    y2: float
    color: Color
    width: float = RULE_W


@dataclass(frozen=True)
class ImageBlock:
    x: float
    y: float
    height: float
    data: bytes


@dataclass(frozen=True)
class PageBreak:
    pass


Block = Union[TextBlock, RectBlock, LineBlock, ImageBlock, PageBreak]


def column_edges(left: float = MARGIN_X, width: float = CONTENT_W) -> List[Tuple[float, float]]:
    """(left, right) of each product table column, proportional to COLUMN_WEIGHTS."""
    edges: List[Tuple[float, float]] = []
    cursor = left
    for weight in COLUMN_WEIGHTS:
        right = cursor + width * weight
        edges.append((cursor, right))
        cursor = right
    return edges


class _LayoutBuilder:
    def __init__(self, document: InvoiceDocument, fonts: TextWidthProvider, logo: Optional[bytes] = None) -> None:
        self.document = document
        self.fonts = fonts
        self.logo = logo
        self.blocks: List[Block] = []
        self.y = MARGIN_TOP

    def text(self, x: float, y: float, text: str, size: float, color: Color, bold: bool = False) -> None:
        if text:
            self.blocks.append(TextBlock(x, y, text, size, color, bold))

    def text_right(self, right: float, y: float, text: str, size: float, color: Color, bold: bool = False) -> None:
        self.text(right - self.fonts.text_width(text, size, bold=bold), y, text, size, color, bold)

    def text_center(self, center: float, y: float, text: str, size: float, color: Color, bold: bool = False) -> None:
        self.text(center - self.fonts.text_width(text, size, bold=bold) / 2.0, y, text, size, color, bold)

    def new_page(self) -> None:
        self.blocks.append(PageBreak())
        self.y = MARGIN_TOP

    def ensure_space(self, height: float) -> None:
        if self.y + height > PAGE_BOTTOM:
            self.new_page()

    def paragraph(
        self,
        text: str,
        size: float = FONT_SIZE_NORMAL,
        color: Color = COLOR_TEXT,
        bold: bool = False,
        line_h: float = LINE_H,
        x: float = MARGIN_X,
        width: float = CONTENT_W,
    ) -> None:
        """Word-wrap ``text`` into the column and advance the cursor, breaking pages as needed."""
        for line in wrap_text(self.fonts, text, width, size, bold=bold):
            self.ensure_space(line_h)
            self.text(x, self.y + size * ASCENT, line, size, color, bold)
            self.y += line_h

    def party_lines(self, lines: Sequence[str], width: float) -> List[Tuple[str, bool]]:
        """Wrapped (text, bold) lines of a party block; the first entry is the name."""
        wrapped: List[Tuple[str, bool]] = []
        for index, line in enumerate(lines):
            bold = index == 0
            for text in wrap_text(self.fonts, line, width, FONT_SIZE_NORMAL, bold=bold):
                wrapped.append((text, bold))
        return wrapped

    def columns_side_by_side(self, columns: Sequence[Tuple[float, float, str, Sequence[str]]]) -> None:
        """Labelled columns drawn row by row, breaking pages as needed."""
        self.ensure_space(SMALL_LINE_H + 2 + LINE_H)
        for x, _, label, _ in columns:
            self.text(x, self.y + FONT_SIZE_SMALL * ASCENT, f"{label}:", FONT_SIZE_SMALL, COLOR_MUTED, bold=True)
        self.y += SMALL_LINE_H + 2

        wrapped = [self.party_lines(lines, width) for _, width, _, lines in columns]
        for row in range(max(len(lines) for lines in wrapped)):
            self.ensure_space(LINE_H)
            for (x, _, _, _), lines in zip(columns, wrapped):
                if row < len(lines):
                    text, bold = lines[row]
                    self.text(x, self.y + FONT_SIZE_NORMAL * ASCENT, text, FONT_SIZE_NORMAL, COLOR_TEXT, bold)
            self.y += LINE_H

    def draw_logo(self) -> float:
        """Place the logo top-left; returns its height, 0 without one."""
        if not self.logo:
            return 0.0
        self.blocks.append(ImageBlock(MARGIN_X, self.y, LOGO_H, self.logo))
        return LOGO_H


class TableLayout(_LayoutBuilder):
    """Logo header, seller/buyer columns, shaded product table and totals."""

    def __init__(self, document: InvoiceDocument, fonts: TextWidthProvider, logo: Optional[bytes] = None) -> None:
        super().__init__(document, fonts, logo)
        self.columns = column_edges()

    def name_width(self) -> float:
        left, right = self.columns[0]
        return right - left - 2 * CELL_PAD_X

    def measure_rows(self) -> List[Tuple[List[str], float]]:
        """Wrapped name lines and row height for every invoice line."""
        rows: List[Tuple[List[str], float]] = []
        for line in self.document.invoice.lines:
            name_lines = wrap_text(self.fonts, line.name, self.name_width(), FONT_SIZE_NORMAL, bold=True)
            height = 2 * CELL_PAD_Y + max(1, len(name_lines)) * LINE_H
            rows.append((name_lines, height))
        return rows

    def totals_height(self) -> float:
        return SECTION_GAP + 2 * LINE_H + 6 + TOTAL_LINE_H

    def _draw_header(self) -> None:
        logo_h = self.draw_logo()
        self.text_right(CONTENT_RIGHT, self.y + FONT_SIZE_TITLE * ASCENT, TITLE, FONT_SIZE_TITLE, COLOR_BRAND, bold=True)
        self.y += max(logo_h, FONT_SIZE_TITLE * 1.2) + HEADER_GAP

        self.paragraph(self.document.metadata_line(), FONT_SIZE_NORMAL, COLOR_MUTED)
        self.y += SECTION_GAP

    def _draw_parties(self) -> None:
        half = (CONTENT_W - COLUMN_GAP) / 2.0
        seller_lines = [self.document.seller_name, *self.document.seller_details]
        self.columns_side_by_side(
            [
                (MARGIN_X, half, LABEL_SELLER, seller_lines),
                (MARGIN_X + half + COLUMN_GAP, half, LABEL_BUYER, self.document.buyer_lines()),
            ]
        )
        self.y += SECTION_GAP

    def _draw_table_header(self) -> None:
        self.blocks.append(RectBlock(MARGIN_X, self.y, CONTENT_W, TABLE_HEADER_H, COLOR_BAR, radius=BAR_RADIUS))
        baseline = self.y + (TABLE_HEADER_H + FONT_SIZE_SMALL * ASCENT) / 2.0
        for index, (label, (left, right)) in enumerate(zip(TABLE_HEADERS, self.columns)):
            if index == 0:
                self.text(left + CELL_PAD_X, baseline, label, FONT_SIZE_SMALL, COLOR_BAR_TEXT, bold=True)
            else:
                self.text_right(right - CELL_PAD_X, baseline, label, FONT_SIZE_SMALL, COLOR_BAR_TEXT, bold=True)
        self.y += TABLE_HEADER_H

    def _draw_row(self, index: int, line: InvoiceLine, name_lines: List[str], height: float) -> None:
        top = self.y
        if index % 2 == 1:
            self.blocks.append(RectBlock(MARGIN_X, top, CONTENT_W, height, COLOR_ROW_SHADE))

        baseline = top + CELL_PAD_Y + FONT_SIZE_NORMAL * ASCENT
        name_left = self.columns[0][0] + CELL_PAD_X
        for offset, text in enumerate(name_lines):
            self.text(name_left, baseline + offset * LINE_H, text, FONT_SIZE_NORMAL, COLOR_TEXT, bold=True)

        values = (
            fmt_qty(line.quantity),
            fmt_money(line.unit_price),
            fmt_money(line.vat),
            fmt_money(line.gross),
        )
        for text, (_, right) in zip(values, self.columns[1:]):
            self.text_right(right - CELL_PAD_X, baseline, text, FONT_SIZE_NORMAL, COLOR_TEXT)

        self.y = top + height

    def _draw_totals(self) -> None:
        net, vat, gross = self.document.invoice.rounded_totals()
        label_right = self.columns[2][1] - CELL_PAD_X
        value_right = CONTENT_RIGHT - CELL_PAD_X

        self.y += SECTION_GAP
        for label, amount in ((LABEL_NET, net), (LABEL_VAT, vat)):
            baseline = self.y + FONT_SIZE_NORMAL * ASCENT
            self.text_right(label_right, baseline, f"{label}:", FONT_SIZE_NORMAL, COLOR_MUTED)
            self.text_right(value_right, baseline, fmt_money(amount), FONT_SIZE_NORMAL, COLOR_TEXT)
            self.y += LINE_H

        self.y += 3
        self.blocks.append(LineBlock(self.columns[1][0], self.y, CONTENT_RIGHT, self.y, COLOR_RULE))
        self.y += 3

        baseline = self.y + FONT_SIZE_TOTAL * ASCENT
        self.text_right(label_right, baseline, f"{LABEL_GROSS}:", FONT_SIZE_TOTAL, COLOR_BRAND, bold=True)
        self.text_right(value_right, baseline, fmt_money(gross), FONT_SIZE_TOTAL, COLOR_BRAND, bold=True)
        self.y += TOTAL_LINE_H

    def build(self) -> List[Block]:
        self._draw_header()
        self._draw_parties()

        rows = self.measure_rows()
        lines = self.document.invoice.lines
        pages = paginate_rows(
            [height for _, height in rows],
            first_page_space=PAGE_BOTTOM - self.y - TABLE_HEADER_H,
            page_space=PAGE_BOTTOM - MARGIN_TOP - TABLE_HEADER_H,
            trailer_height=self.totals_height(),
        )

        for page_index, row_indexes in enumerate(pages):
            if page_index > 0:
                self.new_page()
            if not row_indexes:
                continue
            self._draw_table_header()
            for index in row_indexes:
                name_lines, height = rows[index]
                self._draw_row(index, lines[index], name_lines, height)
            self.blocks.append(LineBlock(MARGIN_X, self.y, CONTENT_RIGHT, self.y, COLOR_RULE))

        self._draw_totals()
        return self.blocks


class SimpleTextLayout(_LayoutBuilder):
    """Flowing text: title, metadata, parties, product bullets and totals."""

    def _section(self, label: str, lines: Sequence[str]) -> None:
        self.paragraph(f"{label}:", FONT_SIZE_NORMAL, COLOR_MUTED, bold=True)
        for line in lines:
            self.paragraph(line)
        self.y += SECTION_GAP / 2.0

    def build(self) -> List[Block]:
        logo_h = self.draw_logo()
        if logo_h:
            self.y += logo_h + HEADER_GAP / 2.0

        self.text_center(PAGE_W / 2.0, self.y + FONT_SIZE_TITLE * ASCENT, TITLE, FONT_SIZE_TITLE, COLOR_TEXT, bold=True)
        self.y += FONT_SIZE_TITLE * 1.2 + HEADER_GAP

        self.paragraph(self.document.metadata_line())
        self.y += SECTION_GAP / 2.0

        self._section(LABEL_SELLER, [self.document.seller_name, *self.document.seller_details])
        self._section(LABEL_BUYER, self.document.buyer_lines())

        product_lines = [
            f"• {line.name} x {fmt_qty(line.quantity)} – {fmt_money(line.unit_price)} "
            f"(su PVM {fmt_money(line.gross)})"
            for line in self.document.invoice.lines
        ]
        self._section(LABEL_PRODUCTS, product_lines)

        net, vat, gross = self.document.invoice.rounded_totals()
        self.paragraph(f"{LABEL_NET}: {fmt_money(net)}")
        self.paragraph(f"{LABEL_VAT}: {fmt_money(vat)}")
        self.paragraph(f"{LABEL_GROSS}: {fmt_money(gross)}", FONT_SIZE_TOTAL, COLOR_BRAND, bold=True, line_h=TOTAL_LINE_H)
        return self.blocks


LAYOUT_BUILDERS = {
    LAYOUT_SIMPLE_TEXT: SimpleTextLayout,
    LAYOUT_TABLE: TableLayout,
}


def build_layout(
    document: InvoiceDocument,
    fonts: TextWidthProvider,
    layout: str = LAYOUT_TABLE,
    logo: Optional[bytes] = None,
) -> List[Block]:
    try:
        builder_cls = LAYOUT_BUILDERS[layout]
    except KeyError:
        raise ValueError(f"Layout {layout!r} is not drawn as blocks") from None
    return builder_cls(document, fonts, logo).build()
