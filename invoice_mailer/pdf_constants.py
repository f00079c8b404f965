"""Page geometry, typography and colors for PDF invoices (points, top-left origin)."""

from __future__ import annotations

# A4
PAGE_W = 595.28
PAGE_H = 841.89

MARGIN_X = 40.0
MARGIN_TOP = 40.0
MARGIN_BOTTOM = 50.0
CONTENT_W = PAGE_W - 2 * MARGIN_X
CONTENT_RIGHT = MARGIN_X + CONTENT_W
PAGE_BOTTOM = PAGE_H - MARGIN_BOTTOM

LOGO_H = 48.0
HEADER_GAP = 18.0
SECTION_GAP = 16.0
COLUMN_GAP = 16.0

FONT_SIZE_TITLE = 20
FONT_SIZE_NORMAL = 10
FONT_SIZE_SMALL = 9
FONT_SIZE_TOTAL = 12

# Baseline offset of a text line from the top of its line box, as a share of the font size.
ASCENT = 0.8
LINE_H = 13.0
SMALL_LINE_H = 12.0
TOTAL_LINE_H = 18.0

TABLE_HEADER_H = 20.0
BAR_RADIUS = 4.0
CELL_PAD_X = 6.0
CELL_PAD_Y = 5.0
RULE_W = 0.5

# Product table columns: name, quantity, unit net price, VAT, line gross.
COLUMN_WEIGHTS = (0.40, 0.10, 0.16, 0.16, 0.18)

COLOR_TEXT = (51, 51, 51)
COLOR_MUTED = (105, 105, 105)
COLOR_BRAND = (216, 27, 96)  # #D81B60
COLOR_BAR = (58, 58, 58)
COLOR_BAR_TEXT = (234, 234, 234)
COLOR_ROW_SHADE = (250, 247, 248)
COLOR_RULE = (221, 221, 221)
