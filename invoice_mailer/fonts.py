"""Font discovery and text rendering helpers."""

from __future__ import annotations

import logging
import os
import threading
import unicodedata
from typing import List, Optional, Tuple

from fpdf import FPDF  # type: ignore

logger = logging.getLogger(__name__)

_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# Characters outside Latin-1 that have a readable replacement for core fonts.
_CORE_FONT_REPLACEMENTS = {
    "€": "EUR ",
    "•": "-",
    "–": "-",
    "—": "-",
    "„": '"',
    "“": '"',
    "”": '"',
    "’": "'",
}


def find_font_path(env_var: str, candidates: List[str]) -> Optional[str]:
    override = os.getenv(env_var)
    if override and os.path.exists(override):
        return override

    for path in candidates:
        if os.path.exists(path):
            return path
    return None


def to_latin1(text: str) -> str:
    """Best-effort transliteration for the built-in PDF fonts."""
    for char, replacement in _CORE_FONT_REPLACEMENTS.items():
        text = text.replace(char, replacement)
    result = []
    for char in text:
        if ord(char) < 256:
            result.append(char)
            continue
        decomposed = unicodedata.normalize("NFKD", char)
        base = "".join(c for c in decomposed if ord(c) < 128 and not unicodedata.combining(c))
        result.append(base or "?")
    return "".join(result)


FONT_INIT_LOCK = threading.Lock()


class FontManager:
    FAMILY = "InvoiceFont"
    CORE_FAMILY = "Helvetica"
    BUNDLED_REGULAR = os.path.join(_PROJECT_ROOT, "fonts", "DejaVuSans.ttf")
    BUNDLED_BOLD = os.path.join(_PROJECT_ROOT, "fonts", "DejaVuSans-Bold.ttf")
    SYSTEM_REGULAR_CANDIDATES = [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/dejavu/DejaVuSans.ttf",
        "/Library/Fonts/DejaVuSans.ttf",
    ]
    SYSTEM_BOLD_CANDIDATES = [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf",
        "/Library/Fonts/DejaVuSans-Bold.ttf",
    ]

    def __init__(self, pdf: FPDF, regular_path: Optional[str] = None, bold_path: Optional[str] = None) -> None:
        self.pdf = pdf
        self.family = self.CORE_FAMILY
        self.use_unicode = False
        self.has_bold = True

        if regular_path is None:
            regular_path = find_font_path(
                "INVOICE_FONT_PATH",
                [self.BUNDLED_REGULAR, *self.SYSTEM_REGULAR_CANDIDATES],
            )
        if bold_path is None:
            bold_path = find_font_path(
                "INVOICE_FONT_BOLD_PATH",
                [self.BUNDLED_BOLD, *self.SYSTEM_BOLD_CANDIDATES],
            )

        if not regular_path:
            logger.warning("asset.skipped font=unicode reason=not_found fallback=%s", self.CORE_FAMILY)
            return

        with FONT_INIT_LOCK:
            try:
                self.pdf.add_font(self.FAMILY, "", regular_path)
            except Exception:
                logger.warning("asset.skipped font=%s fallback=%s", regular_path, self.CORE_FAMILY, exc_info=True)
                return
            self.family = self.FAMILY
            self.use_unicode = True
            self.has_bold = False
            if bold_path:
                try:
                    self.pdf.add_font(self.FAMILY, "B", bold_path)
                    self.has_bold = True
                except Exception:
                    logger.warning("asset.skipped font=%s", bold_path, exc_info=True)

    def prepare(self, text: str) -> str:
        return text if self.use_unicode else to_latin1(text)

    def _style(self, bold: bool) -> str:
        return "B" if bold and self.has_bold else ""

    def text_width(self, text: str, size: float, bold: bool = False) -> float:
        self.pdf.set_font(self.family, self._style(bold), size)
        return self.pdf.get_string_width(self.prepare(text))

    def draw_text(
        self,
        x: float,
        y: float,
        text: str,
        size: float,
        color: Tuple[int, int, int],
        bold: bool = False,
    ) -> None:
        text = self.prepare(text)
        self.pdf.set_text_color(*color)
        self.pdf.set_font(self.family, self._style(bold), size)
        if bold and not self.has_bold:
            self.pdf.text(x, y, text)
            self.pdf.text(x + 0.4, y, text)
        else:
            self.pdf.text(x, y, text)
