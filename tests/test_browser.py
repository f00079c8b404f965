import unittest
from unittest.mock import patch

import httpx

from invoice_mailer.browser import BrowserPdfConverter
from invoice_mailer.errors import RenderError

ENDPOINT = "http://gotenberg:3000/forms/chromium/convert/html"


def response(status: int, content: bytes) -> httpx.Response:
    return httpx.Response(status, content=content, request=httpx.Request("POST", ENDPOINT))


class BrowserPdfConverterTests(unittest.TestCase):
    def test_posts_html_and_returns_pdf(self) -> None:
        with patch("invoice_mailer.browser.httpx.post", return_value=response(200, b"%PDF-1.7 ok")) as post:
            pdf = BrowserPdfConverter(ENDPOINT, timeout_s=5).convert("<html></html>")

        self.assertEqual(pdf, b"%PDF-1.7 ok")
        args, kwargs = post.call_args
        self.assertEqual(args[0], ENDPOINT)
        self.assertEqual(kwargs["files"]["files"][0], "index.html")
        self.assertEqual(kwargs["timeout"], 5)

    def test_requires_endpoint(self) -> None:
        with self.assertRaisesRegex(RenderError, "INVOICE_BROWSER_PDF_URL"):
            BrowserPdfConverter("").convert("<html></html>")

    def test_service_errors_become_render_errors(self) -> None:
        with patch("invoice_mailer.browser.httpx.post", return_value=response(503, b"busy")):
            with self.assertRaises(RenderError):
                BrowserPdfConverter(ENDPOINT).convert("<html></html>")

    def test_non_pdf_response_is_rejected(self) -> None:
        with patch("invoice_mailer.browser.httpx.post", return_value=response(200, b"<html>")):
            with self.assertRaises(RenderError):
                BrowserPdfConverter(ENDPOINT).convert("<html></html>")


if __name__ == "__main__":
    unittest.main()
