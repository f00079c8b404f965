"""Decorative assets loaded once per process.

The logo and font paths are resolved at startup and shared read-only by
every request. A missing asset is logged and left out; it never fails an
invoice.
"""

from __future__ import annotations

import base64
import logging
import os
import threading
from dataclasses import dataclass
from typing import Optional

from .config import ASSET_TIMEOUT_MS, env_str
from .errors import AssetFetchError
from .fonts import FontManager, find_font_path
from .net import fetch_bytes

logger = logging.getLogger(__name__)

_IMAGE_SIGNATURES = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF8", "image/gif"),
)


def sniff_image_type(data: bytes) -> Optional[str]:
    for signature, mime in _IMAGE_SIGNATURES:
        if data.startswith(signature):
            return mime
    return None


@dataclass(frozen=True)
class InvoiceAssets:
    logo: Optional[bytes] = None
    logo_url: Optional[str] = None
    font_path: Optional[str] = None
    font_bold_path: Optional[str] = None

    @property
    def logo_data_uri(self) -> Optional[str]:
        if not self.logo:
            return None
        mime = sniff_image_type(self.logo)
        if mime is None:
            return None
        return f"data:{mime};base64,{base64.b64encode(self.logo).decode('ascii')}"

    @property
    def logo_src(self) -> Optional[str]:
        """Image source for HTML documents: the remote URL when known, else inline data."""
        return self.logo_url or self.logo_data_uri


def load_logo(path: str, url: str, timeout_s: float) -> bytes:
    if path:
        try:
            with open(path, "rb") as handle:
                data = handle.read()
        except OSError as exc:
            raise AssetFetchError(f"Cannot read logo {path}: {exc}") from exc
    else:
        data = fetch_bytes(url, timeout_s)

    if sniff_image_type(data) is None:
        raise AssetFetchError("Logo is not a PNG, JPEG or GIF image")
    return data


def load_assets() -> InvoiceAssets:
    logo_path = env_str("INVOICE_LOGO_PATH")
    logo_url = env_str("INVOICE_LOGO_URL")

    logo: Optional[bytes] = None
    if logo_path or logo_url:
        try:
            logo = load_logo(logo_path, logo_url, ASSET_TIMEOUT_MS / 1000.0)
        except AssetFetchError as exc:
            logger.warning("asset.skipped asset=logo reason=%s", exc)

    font_path = find_font_path(
        "INVOICE_FONT_PATH",
        [FontManager.BUNDLED_REGULAR, *FontManager.SYSTEM_REGULAR_CANDIDATES],
    )
    font_bold_path = find_font_path(
        "INVOICE_FONT_BOLD_PATH",
        [FontManager.BUNDLED_BOLD, *FontManager.SYSTEM_BOLD_CANDIDATES],
    )
    if font_path is None:
        logger.warning("asset.skipped asset=font reason=not_found")

    assets = InvoiceAssets(
        logo=logo,
        logo_url=logo_url if logo is not None and not logo_path else None,
        font_path=font_path,
        font_bold_path=font_bold_path,
    )
    logger.info(
        "assets.loaded logo=%s font=%s",
        "yes" if assets.logo else "no",
        os.path.basename(font_path) if font_path else "core",
    )
    return assets


ASSETS_LOCK = threading.Lock()
ASSETS: Optional[InvoiceAssets] = None


def get_assets() -> InvoiceAssets:
    global ASSETS
    with ASSETS_LOCK:
        if ASSETS is None:
            ASSETS = load_assets()
        return ASSETS
