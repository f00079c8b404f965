"""Network-related helpers."""

from __future__ import annotations

import errno

import httpx

from .errors import AssetFetchError

DISCONNECT_ERRNOS = {
    errno.EPIPE,
    errno.ECONNRESET,
    errno.ETIMEDOUT,
}
if hasattr(errno, "WSAECONNRESET"):
    DISCONNECT_ERRNOS.add(errno.WSAECONNRESET)  # pragma: no cover


def is_client_disconnect(exc: BaseException) -> bool:
    if isinstance(exc, (BrokenPipeError, ConnectionResetError, TimeoutError)):
        return True
    return isinstance(exc, OSError) and exc.errno in DISCONNECT_ERRNOS


def fetch_bytes(url: str, timeout_s: float) -> bytes:
    """GET a remote asset and return its body."""
    url = (url or "").strip()
    if not url:
        raise AssetFetchError("Missing asset URL")
    try:
        resp = httpx.get(url, timeout=timeout_s, follow_redirects=True)
        resp.raise_for_status()
    except httpx.HTTPError as exc:
        raise AssetFetchError(f"Failed to fetch {url}: {exc}") from exc
    if not resp.content:
        raise AssetFetchError(f"Empty response from {url}")
    return resp.content
