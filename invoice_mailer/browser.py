"""HTML to PDF conversion through a headless-browser service.

The service is expected to accept a multipart upload of ``index.html`` and
answer with the PDF bytes, the way Gotenberg's
``/forms/chromium/convert/html`` route does.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from .config import BROWSER_TIMEOUT_MS, env_str
from .errors import RenderError

logger = logging.getLogger(__name__)


class BrowserPdfConverter:
    def __init__(self, endpoint: Optional[str] = None, timeout_s: Optional[float] = None) -> None:
        self.endpoint = (endpoint if endpoint is not None else env_str("INVOICE_BROWSER_PDF_URL")).strip()
        self.timeout_s = timeout_s if timeout_s is not None else BROWSER_TIMEOUT_MS / 1000.0

    def convert(self, html: str) -> bytes:
        if not self.endpoint:
            raise RenderError("browser-pdf layout requires INVOICE_BROWSER_PDF_URL")

        files = {"files": ("index.html", html.encode("utf-8"), "text/html")}
        logger.debug("browser.convert endpoint=%s bytes=%d", self.endpoint, len(html))
        try:
            resp = httpx.post(self.endpoint, files=files, timeout=self.timeout_s)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise RenderError(f"Browser PDF conversion failed: {exc}") from exc

        if not resp.content.startswith(b"%PDF"):
            raise RenderError("Browser PDF conversion returned a non-PDF response")
        return resp.content
