import unittest
from decimal import Decimal

from invoice_mailer.calculations import (
    VAT_RATE,
    calculate_invoice,
    display_invoice_number,
    round_money,
    total_mismatch,
)
from invoice_mailer.models import LineItem


def item(name: str, quantity: int, price: str) -> LineItem:
    return LineItem(name=name, quantity=quantity, price=Decimal(price))


class InvoiceCalculationTests(unittest.TestCase):
    def test_reference_order_totals(self) -> None:
        invoice = calculate_invoice([item("Kremas", 2, "10")])

        self.assertEqual(invoice.rounded_totals(), (Decimal("20.00"), Decimal("4.20"), Decimal("24.20")))

    def test_line_amounts_follow_vat_rate(self) -> None:
        for quantity, price in ((1, "9.99"), (3, "0.33"), (7, "12.49"), (12, "0"), (5, "1234.56")):
            line = calculate_invoice([item("X", quantity, price)]).lines[0]
            net = quantity * Decimal(price)

            self.assertLessEqual(abs(round_money(line.gross) - net * Decimal("1.21")), Decimal("0.005"))
            self.assertEqual(line.vat, line.gross - net)

    def test_totals_sum_lines_and_apply_vat_once(self) -> None:
        products = [item("A", 2, "10.10"), item("B", 1, "5.55"), item("C", 3, "0.99")]
        invoice = calculate_invoice(products)

        self.assertEqual(invoice.net_total, Decimal("28.72"))
        self.assertEqual(round_money(invoice.gross_total), round_money(Decimal("28.72") * Decimal("1.21")))
        self.assertEqual(invoice.gross_total, invoice.net_total + invoice.vat_total)

    def test_rounding_is_half_up_not_truncation(self) -> None:
        invoice = calculate_invoice([item("A", 1, "0.50")])

        # 0.50 * 0.21 = 0.105 exactly
        self.assertEqual(round_money(invoice.vat_total), Decimal("0.11"))
        self.assertEqual(round_money(invoice.gross_total), Decimal("0.61"))

    def test_rounding_happens_once_on_totals(self) -> None:
        invoice = calculate_invoice([item("A", 1, "0.015")] * 3)

        self.assertEqual(round_money(invoice.net_total), Decimal("0.05"))

    def test_calculation_is_repeatable(self) -> None:
        products = [item("A", 2, "3.33"), item("B", 4, "1.10")]

        self.assertEqual(calculate_invoice(products), calculate_invoice(products))

    def test_vat_rate_is_fixed(self) -> None:
        self.assertEqual(VAT_RATE, Decimal("0.21"))


class InvoiceNumberTests(unittest.TestCase):
    def test_prefix_is_always_added(self) -> None:
        self.assertEqual(display_invoice_number("12345"), "EVA12345")
        self.assertEqual(display_invoice_number("100"), "EVA100")
        self.assertEqual(display_invoice_number("EVA7"), "EVAEVA7")


class TotalMismatchTests(unittest.TestCase):
    def setUp(self) -> None:
        self.invoice = calculate_invoice([item("Kremas", 2, "10")])

    def test_matching_total_within_tolerance(self) -> None:
        self.assertIsNone(total_mismatch(self.invoice, Decimal("24.20")))
        self.assertIsNone(total_mismatch(self.invoice, Decimal("24.21")))
        self.assertIsNone(total_mismatch(self.invoice, None))

    def test_reports_difference_beyond_tolerance(self) -> None:
        self.assertEqual(total_mismatch(self.invoice, Decimal("1.00")), Decimal("-23.20"))


if __name__ == "__main__":
    unittest.main()
