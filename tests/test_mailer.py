import smtplib
import unittest
from unittest.mock import MagicMock, patch

from invoice_mailer.config import SmtpSettings
from invoice_mailer.errors import TransportError
from invoice_mailer.mailer import build_message, build_subject, send_invoice_email

from support import sample_rendered

SETTINGS = SmtpSettings(
    host="smtp.example.com",
    port=465,
    user="info@example.com",
    password="s3cret-pass",
    sender='"Beauty by Ella" <info@example.com>',
)


def smtp_session(factory: MagicMock) -> MagicMock:
    return factory.return_value.__enter__.return_value


class BuildMessageTests(unittest.TestCase):
    def test_subject_embeds_payment_reference(self) -> None:
        self.assertIn("ORD-1", build_subject("ORD-1"))

    def test_message_has_html_body_and_pdf_attachment(self) -> None:
        msg = build_message("j@example.com", "Jonas", sample_rendered(), "ORD-1", SETTINGS.sender)

        self.assertEqual(msg["To"], "j@example.com")
        self.assertEqual(msg["From"], SETTINGS.sender)
        self.assertIn("ORD-1", msg["Subject"])
        self.assertTrue(msg["Message-ID"].endswith("@example.com>"))

        attachments = list(msg.iter_attachments())
        self.assertEqual(len(attachments), 1)
        self.assertEqual(attachments[0].get_filename(), "saskaita-EVA100.pdf")
        self.assertEqual(attachments[0].get_content_type(), "application/pdf")
        self.assertEqual(attachments[0].get_content(), b"%PDF-1.4 test")

        html_part = msg.get_body(preferencelist=("html",))
        assert html_part is not None
        self.assertIn("Sąskaita", html_part.get_content())

    def test_requires_recipient(self) -> None:
        with self.assertRaises(ValueError):
            build_message(" ", "Jonas", sample_rendered(), "ORD-1", SETTINGS.sender)


class SendInvoiceEmailTests(unittest.TestCase):
    @patch("invoice_mailer.mailer.smtplib.SMTP_SSL")
    def test_sends_once_over_tls(self, smtp_ssl: MagicMock) -> None:
        message_id = send_invoice_email("j@example.com", "Jonas", sample_rendered(), "ORD-1", SETTINGS)

        smtp_ssl.assert_called_once_with("smtp.example.com", 465, timeout=12.0)
        session = smtp_session(smtp_ssl)
        session.login.assert_called_once_with("info@example.com", "s3cret-pass")
        session.send_message.assert_called_once()
        sent = session.send_message.call_args[0][0]
        self.assertEqual(sent["Message-ID"], message_id)

    @patch("invoice_mailer.mailer.smtplib.SMTP")
    def test_other_ports_use_starttls(self, smtp: MagicMock) -> None:
        settings = SmtpSettings(host="smtp.example.com", port=587, user="u", password="p")
        send_invoice_email("j@example.com", "Jonas", sample_rendered(), "ORD-1", settings)

        session = smtp_session(smtp)
        session.starttls.assert_called_once()
        session.send_message.assert_called_once()

    @patch("invoice_mailer.mailer.smtplib.SMTP_SSL")
    def test_transport_failure_is_not_retried(self, smtp_ssl: MagicMock) -> None:
        session = smtp_session(smtp_ssl)
        session.send_message.side_effect = smtplib.SMTPRecipientsRefused({"j@example.com": (550, b"no")})

        with self.assertLogs("invoice_mailer.mailer", level="INFO") as logs:
            with self.assertRaises(TransportError):
                send_invoice_email("j@example.com", "Jonas", sample_rendered(), "ORD-1", SETTINGS)

        self.assertEqual(session.send_message.call_count, 1)
        self.assertFalse(any("s3cret-pass" in line for line in logs.output))

    @patch("invoice_mailer.mailer.smtplib.SMTP_SSL", side_effect=OSError("connection refused"))
    def test_connection_failure(self, _smtp_ssl: MagicMock) -> None:
        with self.assertRaisesRegex(TransportError, "connection refused"):
            send_invoice_email("j@example.com", "Jonas", sample_rendered(), "ORD-1", SETTINGS)

    @patch("invoice_mailer.mailer.load_smtp_settings", return_value=None)
    def test_unconfigured_transport(self, _load: MagicMock) -> None:
        with self.assertRaisesRegex(TransportError, "not configured"):
            send_invoice_email("j@example.com", "Jonas", sample_rendered(), "ORD-1")

    def test_settings_repr_hides_password(self) -> None:
        self.assertNotIn("s3cret-pass", repr(SETTINGS))


if __name__ == "__main__":
    unittest.main()
