"""The order pipeline: validate, calculate, render, send."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .assets import InvoiceAssets
from .calculations import round_money, total_mismatch
from .config import LAYOUT_TABLE, SmtpSettings
from .document import build_document
from .errors import OrderValidationError
from .mailer import send_invoice_email
from .rendering import RenderedDocument, render_document
from .validation import validate_order

logger = logging.getLogger(__name__)

Renderer = Callable[..., RenderedDocument]
Sender = Callable[..., str]


@dataclass(frozen=True)
class DeliveryResult:
    message_id: str
    invoice_number: str

    def to_response(self) -> Dict[str, Any]:
        return {"success": True, "messageId": self.message_id}


class InvoiceService:
    def __init__(
        self,
        layout: str = LAYOUT_TABLE,
        assets: Optional[InvoiceAssets] = None,
        smtp_settings: Optional[SmtpSettings] = None,
        reject_total_mismatch: bool = False,
        renderer: Renderer = render_document,
        sender: Sender = send_invoice_email,
    ) -> None:
        self.layout = layout
        self.assets = assets or InvoiceAssets()
        self.smtp_settings = smtp_settings
        self.reject_total_mismatch = reject_total_mismatch
        self.renderer = renderer
        self.sender = sender

    def process(self, payload: Dict[str, Any]) -> DeliveryResult:
        try:
            order = validate_order(payload)
        except OrderValidationError as exc:
            logger.info("order.rejected reason=%s", exc)
            raise

        document = build_document(order)
        gross = round_money(document.invoice.gross_total)
        mismatch = total_mismatch(document.invoice, order.client_total)
        if mismatch is not None:
            logger.warning(
                "order.total_mismatch reference=%s client=%s computed=%s",
                order.payment_reference,
                order.client_total,
                gross,
            )
            if self.reject_total_mismatch:
                raise OrderValidationError(
                    f"total_price {order.client_total} does not match computed total {gross}"
                )

        logger.info(
            "order.accepted reference=%s invoice=%s lines=%d gross=%s layout=%s",
            order.payment_reference,
            document.number,
            len(document.invoice.lines),
            gross,
            self.layout,
        )

        rendered = self.renderer(document, self.layout, self.assets)
        message_id = self.sender(
            order.recipient,
            order.customer_name,
            rendered,
            order.payment_reference,
            self.smtp_settings,
        )
        logger.info("order.sent reference=%s message_id=%s", order.payment_reference, message_id)
        return DeliveryResult(message_id=message_id, invoice_number=document.number)
