"""Sending the rendered invoice to the customer over SMTP."""

from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from email.utils import make_msgid, parseaddr
from typing import Optional

from .config import SmtpSettings, load_smtp_settings
from .errors import TransportError
from .rendering import RenderedDocument

logger = logging.getLogger(__name__)

SUBJECT_TEMPLATE = "Jūsų užsakymas patvirtintas! Užsakymo Nr. {reference}"


def build_subject(payment_reference: str) -> str:
    return SUBJECT_TEMPLATE.format(reference=payment_reference)


def build_message(
    recipient: str,
    customer_name: str,
    document: RenderedDocument,
    payment_reference: str,
    sender: str,
) -> EmailMessage:
    recipient = (recipient or "").strip()
    if not recipient:
        raise ValueError("Recipient address is required")

    msg = EmailMessage()
    msg["From"] = sender
    msg["To"] = recipient
    msg["Subject"] = build_subject(payment_reference)
    domain = parseaddr(sender)[1].rpartition("@")[2] or None
    msg["Message-ID"] = make_msgid(domain=domain)

    greeting = f"Ačiū, {customer_name}! Sąskaita prisegta PDF formatu."
    msg.set_content(f"{greeting}\n\n{document.text}")
    msg.add_alternative(document.html, subtype="html")
    msg.add_attachment(
        document.pdf,
        maintype="application",
        subtype="pdf",
        filename=document.filename,
    )
    return msg


def send_invoice_email(
    recipient: str,
    customer_name: str,
    document: RenderedDocument,
    payment_reference: str,
    settings: Optional[SmtpSettings] = None,
) -> str:
    """Send one email with the invoice attached; returns its Message-ID.

    Port 465 uses SMTP over TLS, other ports use STARTTLS. There is a single
    attempt: any transport failure is raised as TransportError.
    """
    cfg = settings or load_smtp_settings()
    if cfg is None:
        raise TransportError("SMTP is not configured (SMTP_HOST, SMTP_USER, SMTP_PASS)")

    msg = build_message(recipient, customer_name, document, payment_reference, cfg.sender)
    logger.info("smtp.send to=%s host=%s port=%s", msg["To"], cfg.host, cfg.port)

    try:
        if cfg.port == 465:
            with smtplib.SMTP_SSL(cfg.host, cfg.port, timeout=cfg.timeout) as smtp:
                smtp.login(cfg.user, cfg.password)
                smtp.send_message(msg)
        else:
            with smtplib.SMTP(cfg.host, cfg.port, timeout=cfg.timeout) as smtp:
                smtp.ehlo()
                smtp.starttls()
                smtp.ehlo()
                smtp.login(cfg.user, cfg.password)
                smtp.send_message(msg)
    except (smtplib.SMTPException, OSError) as exc:
        logger.error("smtp.failed to=%s reason=%s", msg["To"], exc)
        raise TransportError(f"Failed to send email via SMTP: {exc}") from exc

    return str(msg["Message-ID"])
