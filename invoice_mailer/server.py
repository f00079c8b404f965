"""HTTP server entrypoints for the invoice endpoint."""

from __future__ import annotations

import json
import logging
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict, Optional

from .assets import get_assets
from .config import LISTEN_BACKLOG, MAX_BODY_BYTES as MAX_BODY_BYTES_CONFIG, get_layout, reject_total_mismatch
from .errors import OrderValidationError
from .net import is_client_disconnect
from .service import InvoiceService
from .validation import parse_order_payload

logger = logging.getLogger(__name__)

ORDER_PATHS = ("/", "/api/send-email", "/api/send-email.js", "/send-email")
HEALTH_PATHS = ("/health", "/healthz")
METHOD_NOT_ALLOWED = {"error": "Only POST requests allowed"}
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

SERVICE_LOCK = threading.Lock()
SERVICE: Optional[InvoiceService] = None


class DependencyError(RuntimeError):
    """Raised when a required runtime dependency is missing."""


def check_pdf_dependency() -> None:
    try:
        from . import pdf  # noqa: F401
    except ModuleNotFoundError as exc:
        if exc.name == "fpdf":
            raise DependencyError(
                "Missing dependency 'fpdf2'. Install the project with 'pip install .'."
            ) from exc
        raise


def create_service() -> InvoiceService:
    return InvoiceService(
        layout=get_layout(),
        assets=get_assets(),
        reject_total_mismatch=reject_total_mismatch(),
    )


def get_service() -> InvoiceService:
    global SERVICE
    with SERVICE_LOCK:
        if SERVICE is None:
            SERVICE = create_service()
        return SERVICE


class InvoiceHandler(BaseHTTPRequestHandler):
    MAX_BODY_BYTES = MAX_BODY_BYTES_CONFIG

    def _write_response(self, status: int, content_type: Optional[str], body: bytes) -> bool:
        try:
            self.send_response(status)
            for name, value in CORS_HEADERS.items():
                self.send_header(name, value)
            if content_type:
                self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            if body:
                self.wfile.write(body)
            return True
        except Exception as exc:
            if is_client_disconnect(exc):
                return False
            raise

    def _send_json(self, status: int, payload: Dict[str, Any]) -> bool:
        body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        return self._write_response(status, "application/json; charset=utf-8", body)

    def _read_body(self) -> Optional[bytes]:
        header = self.headers.get("Content-Length")
        if header is None:
            self._send_json(411, {"error": "Content-Length header is required."})
            return None

        try:
            content_length = int(header)
        except ValueError:
            self._send_json(400, {"error": "Content-Length must be an integer."})
            return None

        if content_length <= 0:
            self._send_json(400, {"error": "Request body cannot be empty."})
            return None

        if content_length > self.MAX_BODY_BYTES:
            self._send_json(413, {"error": f"Body exceeds {self.MAX_BODY_BYTES} bytes."})
            return None

        try:
            return self.rfile.read(content_length)
        except Exception as exc:
            if is_client_disconnect(exc):
                return None
            raise

    def do_OPTIONS(self) -> None:
        self._write_response(200, None, b"")

    def do_POST(self) -> None:
        if self.path.split("?", 1)[0] not in ORDER_PATHS:
            self._send_json(404, {"error": "Unsupported endpoint."})
            return

        body = self._read_body()
        if body is None:
            return

        payload, parse_error = parse_order_payload(body)
        if parse_error is not None:
            status, error_body = parse_error
            self._send_json(status, error_body)
            return

        try:
            result = get_service().process(payload)
        except OrderValidationError as exc:
            self._send_json(400, {"error": str(exc)})
            return
        except Exception as exc:
            logger.exception("order.failed")
            self._send_json(500, {"error": str(exc) or "Email send failed"})
            return

        self._send_json(200, result.to_response())

    def do_GET(self) -> None:
        if self.path.split("?", 1)[0] in HEALTH_PATHS:
            self._send_json(200, {"status": "ok"})
            return
        self._send_json(405, METHOD_NOT_ALLOWED)

    def _method_not_allowed(self) -> None:
        self._send_json(405, METHOD_NOT_ALLOWED)

    do_PUT = _method_not_allowed
    do_PATCH = _method_not_allowed
    do_DELETE = _method_not_allowed

    def handle_one_request(self) -> None:
        try:
            super().handle_one_request()
        except Exception as exc:
            if is_client_disconnect(exc):
                return
            raise

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug("http %s - %s", self.address_string(), format % args)


class InvoiceHTTPServer(ThreadingHTTPServer):
    daemon_threads = True
    allow_reuse_address = True
    request_queue_size = LISTEN_BACKLOG


def run(host: str = "0.0.0.0", port: int = 8080) -> None:
    check_pdf_dependency()
    get_service()
    server = InvoiceHTTPServer((host, port), InvoiceHandler)
    logger.info("Invoice API server listening on http://%s:%s", host, port)
    server.serve_forever()
