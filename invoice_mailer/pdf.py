"""Drawing layout blocks onto an fpdf2 document."""

from __future__ import annotations

import io
import logging
from typing import Iterable, Optional

from fpdf import FPDF  # type: ignore

from .assets import InvoiceAssets
from .config import LAYOUT_TABLE
from .document import InvoiceDocument
from .fonts import FontManager
from .formatting import round_rect
from .layout import Block, ImageBlock, LineBlock, PageBreak, RectBlock, TextBlock, build_layout
from .pdf_constants import PAGE_H, PAGE_W

logger = logging.getLogger(__name__)


class PdfCanvas:
    def __init__(self, assets: Optional[InvoiceAssets] = None) -> None:
        self.assets = assets or InvoiceAssets()
        self.pdf = FPDF(unit="pt", format=(PAGE_W, PAGE_H))
        self.pdf.set_auto_page_break(False)
        self.pdf.set_margins(0, 0, 0)
        self.pdf.add_page()
        self.fonts = FontManager(self.pdf, self.assets.font_path, self.assets.font_bold_path)

    def _draw_image(self, block: ImageBlock) -> None:
        try:
            self.pdf.image(io.BytesIO(block.data), x=block.x, y=block.y, h=block.height)
        except Exception:
            logger.warning("asset.skipped asset=logo reason=undecodable", exc_info=True)

    def draw(self, blocks: Iterable[Block]) -> None:
        for block in blocks:
            if isinstance(block, PageBreak):
                self.pdf.add_page()
            elif isinstance(block, TextBlock):
                self.fonts.draw_text(block.x, block.y, block.text, block.size, block.color, bold=block.bold)
            elif isinstance(block, RectBlock):
                self.pdf.set_fill_color(*block.color)
                round_rect(self.pdf, block.x, block.y, block.width, block.height, block.radius)
            elif isinstance(block, LineBlock):
                self.pdf.set_draw_color(*block.color)
                self.pdf.set_line_width(block.width)
                self.pdf.line(block.x1, block.y1, block.x2, block.y2)
            elif isinstance(block, ImageBlock):
                self._draw_image(block)
            else:
                raise TypeError(f"Unsupported layout block: {type(block).__name__}")

    def output(self) -> bytes:
        pdf_blob = self.pdf.output()
        if isinstance(pdf_blob, (bytes, bytearray)):
            return bytes(pdf_blob)
        raise RuntimeError(f"Unexpected PDF output type: {type(pdf_blob).__name__}")


def render_pdf(document: InvoiceDocument, layout: str = LAYOUT_TABLE, assets: Optional[InvoiceAssets] = None) -> bytes:
    canvas = PdfCanvas(assets)
    blocks = build_layout(document, canvas.fonts, layout, logo=canvas.assets.logo)
    canvas.draw(blocks)
    return canvas.output()
