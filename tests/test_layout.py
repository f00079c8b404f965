import unittest
from typing import List

from invoice_mailer.layout import (
    ImageBlock,
    PageBreak,
    RectBlock,
    SimpleTextLayout,
    TableLayout,
    TextBlock,
    build_layout,
    column_edges,
)
from invoice_mailer.pdf_constants import (
    CELL_PAD_X,
    COLOR_BAR,
    COLOR_BRAND,
    COLOR_ROW_SHADE,
    CONTENT_W,
    FONT_SIZE_NORMAL,
    MARGIN_X,
    PAGE_BOTTOM,
)

from support import FakeFonts, sample_document

LONG_NAME = "Drėkinamasis veido kremas su hialurono rūgštimi ir vitaminu E jautriai odai, 50 ml"


def texts(blocks) -> List[TextBlock]:
    return [block for block in blocks if isinstance(block, TextBlock)]


class ColumnTests(unittest.TestCase):
    def test_columns_span_the_content_width_proportionally(self) -> None:
        edges = column_edges()

        self.assertEqual(len(edges), 5)
        self.assertAlmostEqual(edges[0][0], MARGIN_X)
        self.assertAlmostEqual(edges[-1][1], MARGIN_X + CONTENT_W)
        self.assertAlmostEqual(edges[0][1] - edges[0][0], CONTENT_W * 0.40)


class TableLayoutTests(unittest.TestCase):
    def setUp(self) -> None:
        self.fonts = FakeFonts()

    def test_template_regions_are_present(self) -> None:
        blocks = build_layout(sample_document(), self.fonts, "table")
        content = [block.text for block in texts(blocks)]

        self.assertIn("Sąskaita faktūra", content)
        self.assertTrue(any("EVA100" in text and "ORD-1" in text for text in content))
        self.assertIn("Stiklų keitimas automobiliams, MB", content)
        self.assertIn("Jonas Jonaitis", content)
        self.assertIn("Kremas", content)
        self.assertIn("€20,00", content)
        self.assertIn("€4,20", content)

    def test_gross_total_is_emphasized(self) -> None:
        blocks = build_layout(sample_document(), self.fonts, "table")
        gross = [block for block in texts(blocks) if block.text == "€24,20"]

        # once in the product row, once in the totals block
        self.assertEqual(len(gross), 2)
        total = gross[-1]
        self.assertTrue(total.bold)
        self.assertEqual(total.color, COLOR_BRAND)
        self.assertGreater(total.size, FONT_SIZE_NORMAL)

    def test_numeric_columns_are_right_aligned(self) -> None:
        blocks = build_layout(sample_document(), self.fonts, "table")
        row_gross = [block for block in texts(blocks) if block.text == "€24,20"][0]
        right = column_edges()[-1][1] - CELL_PAD_X

        self.assertAlmostEqual(row_gross.x + self.fonts.text_width(row_gross.text, row_gross.size), right)

    def test_long_names_wrap_and_grow_the_row(self) -> None:
        products = [
            {"name": LONG_NAME, "quantity": 1, "price": 12.5},
            {"name": "Muilas", "quantity": 3, "price": 2},
        ]
        layout = TableLayout(sample_document(products=products), self.fonts)
        (long_lines, long_height), (short_lines, short_height) = layout.measure_rows()

        self.assertGreater(len(long_lines), 1)
        self.assertEqual(len(short_lines), 1)
        self.assertGreater(long_height, short_height)
        for line in long_lines:
            self.assertLessEqual(self.fonts.text_width(line, FONT_SIZE_NORMAL), layout.name_width())

    def test_wrapped_rows_do_not_overlap_the_next_row(self) -> None:
        products = [
            {"name": LONG_NAME, "quantity": 1, "price": 12.5},
            {"name": "Muilas", "quantity": 3, "price": 2},
        ]
        layout = TableLayout(sample_document(products=products), self.fonts)
        long_lines, _ = layout.measure_rows()[0]
        blocks = layout.build()

        name_blocks = {block.text: block for block in texts(blocks)}
        last_long_line = name_blocks[long_lines[-1]]
        next_row = name_blocks["Muilas"]
        self.assertGreater(next_row.y, last_long_line.y)

        shade = [block for block in blocks if isinstance(block, RectBlock) and block.color == COLOR_ROW_SHADE]
        self.assertEqual(len(shade), 1)
        self.assertGreater(shade[0].y, last_long_line.y)

    def test_rows_are_shaded_alternately(self) -> None:
        products = [{"name": f"Prekė {i}", "quantity": 1, "price": 1} for i in range(5)]
        blocks = build_layout(sample_document(products=products), self.fonts, "table")
        shade = [block for block in blocks if isinstance(block, RectBlock) and block.color == COLOR_ROW_SHADE]

        self.assertEqual(len(shade), 2)

    def test_long_tables_break_pages_and_repeat_the_header(self) -> None:
        products = [{"name": f"Prekė {i}", "quantity": 1, "price": 1} for i in range(80)]
        blocks = build_layout(sample_document(products=products), self.fonts, "table")

        breaks = [block for block in blocks if isinstance(block, PageBreak)]
        bars = [block for block in blocks if isinstance(block, RectBlock) and block.color == COLOR_BAR]
        self.assertGreaterEqual(len(breaks), 1)
        self.assertEqual(len(bars), len(breaks) + 1)
        for block in texts(blocks):
            self.assertLess(block.y, PAGE_BOTTOM + 20)

    def test_tall_buyer_block_stays_on_the_page(self) -> None:
        address = "\n".join(f"Gatvė {i}" for i in range(70))
        blocks = build_layout(sample_document(shipping_address=address), self.fonts, "table")
        content = texts(blocks)

        for block in content:
            self.assertLessEqual(block.y, PAGE_BOTTOM)
        self.assertIn("Gatvė 69", [block.text for block in content])
        self.assertGreaterEqual(sum(isinstance(block, PageBreak) for block in blocks), 1)

        total = [block for block in content if block.text == "€24,20"][-1]
        self.assertTrue(total.bold)
        self.assertEqual(total.color, COLOR_BRAND)

    def test_table_follows_a_buyer_block_that_fills_the_first_page(self) -> None:
        address = "\n".join(f"Gatvė {i}" for i in range(53))
        blocks = build_layout(sample_document(shipping_address=address), self.fonts, "table")

        for block in texts(blocks):
            self.assertLessEqual(block.y, PAGE_BOTTOM)
        row_name = [block for block in texts(blocks) if block.text == "Kremas"][0]
        bar = [block for block in blocks if isinstance(block, RectBlock) and block.color == COLOR_BAR][0]
        self.assertLess(bar.y, row_name.y)
        self.assertLessEqual(row_name.y, PAGE_BOTTOM)

    def test_logo_is_placed_when_available(self) -> None:
        logo = b"\x89PNG\r\n\x1a\nfake"
        with_logo = build_layout(sample_document(), self.fonts, "table", logo=logo)
        without_logo = build_layout(sample_document(), self.fonts, "table")

        self.assertIsInstance(with_logo[0], ImageBlock)
        self.assertFalse(any(isinstance(block, ImageBlock) for block in without_logo))

    def test_logo_does_not_change_totals(self) -> None:
        with_logo = build_layout(sample_document(), self.fonts, "table", logo=b"broken")
        without_logo = build_layout(sample_document(), self.fonts, "table")

        def money_texts(blocks):
            return [block.text for block in texts(blocks) if block.text.startswith("€")]

        self.assertEqual(money_texts(with_logo), money_texts(without_logo))


class SimpleTextLayoutTests(unittest.TestCase):
    def test_lists_products_as_bullets_with_totals(self) -> None:
        blocks = SimpleTextLayout(sample_document(), FakeFonts()).build()
        content = [block.text for block in texts(blocks)]

        self.assertIn("• Kremas x 2 – €10,00 (su PVM €24,20)", content)
        self.assertIn("Suma be PVM: €20,00", content)
        self.assertIn("PVM (21%): €4,20", content)
        self.assertIn("Bendra suma: €24,20", content)
        self.assertIn("Pardavėjas:", content)
        self.assertIn("Pirkėjas:", content)

    def test_buyer_block_includes_optional_fields(self) -> None:
        document = sample_document(
            phone="+37060000000",
            shipping_address={"street": "Gedimino pr. 1", "city": "Vilnius", "postal_code": "01103"},
        )
        content = [block.text for block in texts(SimpleTextLayout(document, FakeFonts()).build())]

        self.assertIn("Gedimino pr. 1", content)
        self.assertIn("01103 Vilnius", content)
        self.assertIn("Tel.: +37060000000", content)

    def test_tall_buyer_block_flows_onto_next_page(self) -> None:
        address = "\n".join(f"Gatvė {i}" for i in range(70))
        blocks = SimpleTextLayout(sample_document(shipping_address=address), FakeFonts()).build()

        for block in texts(blocks):
            self.assertLessEqual(block.y, PAGE_BOTTOM)
        self.assertIn("Bendra suma: €24,20", [block.text for block in texts(blocks)])
        self.assertTrue(any(isinstance(block, PageBreak) for block in blocks))

    def test_browser_layout_is_not_drawn_as_blocks(self) -> None:
        with self.assertRaises(ValueError):
            build_layout(sample_document(), FakeFonts(), "browser-pdf")


if __name__ == "__main__":
    unittest.main()
