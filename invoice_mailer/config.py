"""Runtime configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Tuple


def env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value >= minimum else default


def env_str(name: str, default: str = "") -> str:
    return (os.getenv(name) or default).strip()


def env_flag(name: str) -> bool:
    return env_str(name).lower() in ("1", "true", "yes", "on")


LAYOUT_SIMPLE_TEXT = "simple-text"
LAYOUT_TABLE = "table"
LAYOUT_BROWSER_PDF = "browser-pdf"
LAYOUTS = (LAYOUT_SIMPLE_TEXT, LAYOUT_TABLE, LAYOUT_BROWSER_PDF)

MAX_BODY_BYTES = env_int("INVOICE_MAX_BODY_BYTES", 1024 * 1024, minimum=1024)
LISTEN_BACKLOG = env_int("INVOICE_LISTEN_BACKLOG", 128, minimum=1)
ASSET_TIMEOUT_MS = env_int("INVOICE_ASSET_TIMEOUT_MS", 5000, minimum=100)
BROWSER_TIMEOUT_MS = env_int("INVOICE_BROWSER_TIMEOUT_MS", 30000, minimum=1000)

# Business registration details printed in the seller block.
SELLER_NAME = "Stiklų keitimas automobiliams, MB"
SELLER_DETAILS: Tuple[str, ...] = (
    "Įmonės kodas: 305232614",
    "PVM kodas: LT100017540118",
    "Giraitės g. 60A-2, Trakų r.",
)

DEFAULT_SENDER = '"Beauty by Ella" <info@beautybyella.lt>'
DEFAULT_SMTP_PORT = 465


def get_layout() -> str:
    layout = env_str("INVOICE_LAYOUT", LAYOUT_TABLE).lower()
    if layout not in LAYOUTS:
        raise ValueError(
            f"Invalid INVOICE_LAYOUT value: {layout!r}. Expected one of {', '.join(LAYOUTS)}."
        )
    return layout


def reject_total_mismatch() -> bool:
    return env_flag("INVOICE_REJECT_TOTAL_MISMATCH")


@dataclass(frozen=True)
class SmtpSettings:
    host: str
    port: int
    user: str
    password: str = ""
    sender: str = DEFAULT_SENDER
    timeout: float = 12.0

    def __repr__(self) -> str:
        return f"SmtpSettings(host={self.host!r}, port={self.port}, user={self.user!r}, sender={self.sender!r})"


def load_smtp_settings() -> Optional[SmtpSettings]:
    """Read SMTP_* variables; returns None when the transport is not configured."""
    host = env_str("SMTP_HOST")
    user = env_str("SMTP_USER")
    password = os.getenv("SMTP_PASS") or ""
    if not host or not user or not password:
        return None

    port_raw = env_str("SMTP_PORT", str(DEFAULT_SMTP_PORT))
    try:
        port = int(port_raw)
    except ValueError as exc:
        raise ValueError(f"Invalid SMTP_PORT value: {port_raw}") from exc

    timeout = env_int("SMTP_TIMEOUT", 12, minimum=1)
    return SmtpSettings(
        host=host,
        port=port,
        user=user,
        password=password,
        sender=env_str("SMTP_FROM") or DEFAULT_SENDER,
        timeout=float(timeout),
    )
