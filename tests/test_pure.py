import os
import tempfile
import unittest
from datetime import datetime

from helpers import order_json

from api.models import Order
from utils.pure import (
    estimate_eta,
    format_money,
    generate_markdown_table,
    invoice_text,
    pretty_date,
    write_invoice,
)


class MarkdownTableTestCase(unittest.TestCase):
    def test_table_with_alignments(self):
        table = generate_markdown_table(["Item", "Qty"], [["Naan", 2]], ["l", "r"])
        self.assertEqual(
            table.splitlines(),
            ["| Item | Qty |", "| :--- | ---: |", "| Naan | 2 |"],
        )

    def test_first_row_as_headers(self):
        table = generate_markdown_table(None, [["A", "B"], ["1", "2"]])
        self.assertTrue(table.startswith("| A | B |"))
        self.assertEqual(len(table.splitlines()), 3)

    def test_cells_are_escaped(self):
        table = generate_markdown_table(["x"], [["a|b\nc"]])
        self.assertIn("a\\|b c", table)

    def test_empty(self):
        self.assertEqual(generate_markdown_table(None, []), "")

    def test_mismatched_aligns(self):
        with self.assertRaises(ValueError):
            generate_markdown_table(["a", "b"], [], ["l"])


class FormattingTestCase(unittest.TestCase):
    def test_format_money(self):
        self.assertEqual(format_money(1234.5), "₹1,234.50")
        self.assertEqual(format_money("0"), "₹0.00")

    def test_pretty_date(self):
        self.assertEqual(pretty_date("2024-05-01T12:00:00"), "01 May 2024, 12:00")
        self.assertEqual(pretty_date(None), "N/A")
        self.assertEqual(pretty_date("yesterday"), "yesterday")

    def test_eta_is_stable_and_never_negative(self):
        created = "2024-05-01T12:00:00"
        eta, left = estimate_eta(created, now=datetime(2024, 5, 1, 12, 5))
        self.assertEqual(eta, "12:15")
        self.assertEqual(left, 10)

        self.assertEqual(estimate_eta(created, now=datetime(2024, 5, 1, 14, 0)), ("12:15", 0))
        self.assertIsNone(estimate_eta(None))


class InvoiceTestCase(unittest.TestCase):
    def setUp(self):
        self.order = Order.from_json(order_json("o9"))

    def test_invoice_text(self):
        text = invoice_text(self.order)
        self.assertIn("Invoice - Order o9", text)
        self.assertIn("Paneer Tikka x 2", text)
        self.assertIn("Subtotal: ₹200.00", text)
        self.assertIn("Delivery: ₹30.00", text)
        self.assertIn("GST (5%): ₹10.00", text)
        self.assertIn("Total: ₹240.00", text)

    def test_write_invoice(self):
        with tempfile.TemporaryDirectory() as tmp:
            directory = os.path.join(tmp, "invoices")
            path = write_invoice(self.order, directory)

            self.assertEqual(path, os.path.join(directory, "invoice-o9.txt"))
            with open(path, encoding="utf-8") as f:
                self.assertEqual(f.read(), invoice_text(self.order) + "\n")


if __name__ == "__main__":
    unittest.main()
