"""SMTP mailer.

Hands a composed :class:`~email.message.EmailMessage` to the configured
relay:
- port 465 → implicit TLS (``SMTP_SSL``)
- any other port → plaintext connection, upgraded with STARTTLS when the
  server advertises it
No retries; a failure surfaces as :class:`DispatchError`.
"""

from __future__ import annotations

import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import make_msgid

from careers_site.config import MailSettings
from careers_site.errors import DispatchError

logger = logging.getLogger(__name__)


class SmtpMailer:
    """Sends one message per call over a fresh SMTP connection."""

    def __init__(self, settings: MailSettings) -> None:
        self.settings = settings

    # ── Public API ────────────────────────────────────────────────────────

    def send(self, message: EmailMessage) -> str:
        """Dispatch ``message`` and return its Message-ID."""
        if "Message-ID" not in message:
            message["Message-ID"] = make_msgid(domain=_domain_of(self.settings.sender))
        message_id = str(message["Message-ID"])

        try:
            with self._connect() as client:
                client.login(self.settings.user, self.settings.password)
                client.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error(
                "SMTP dispatch failed: host=%s port=%s implicit_tls=%s error=%s",
                self.settings.host,
                self.settings.port,
                self.settings.implicit_tls,
                exc,
            )
            raise DispatchError(_failure_text(exc)) from exc

        logger.info("Application e-mail dispatched: message_id=%s", message_id)
        return message_id

    # ── Internal helpers ──────────────────────────────────────────────────

    def _connect(self) -> smtplib.SMTP:
        """Open a connection using the transport implied by the port."""
        kwargs = {}
        if self.settings.timeout is not None:
            kwargs["timeout"] = self.settings.timeout

        if self.settings.implicit_tls:
            return smtplib.SMTP_SSL(
                self.settings.host,
                self.settings.port,
                context=ssl.create_default_context(),
                **kwargs,
            )

        client = smtplib.SMTP(self.settings.host, self.settings.port, **kwargs)
        try:
            client.ehlo()
            if client.has_extn("starttls"):
                client.starttls(context=ssl.create_default_context())
                client.ehlo()
        except (smtplib.SMTPException, OSError):
            client.close()
            raise
        return client


def _domain_of(address: str) -> str | None:
    _, _, domain = address.rpartition("@")
    return domain.strip("> ") or None


def _failure_text(exc: Exception) -> str | None:
    """Best human-readable text for a transport failure, or None."""
    if isinstance(exc, smtplib.SMTPResponseException):
        detail = exc.smtp_error
        if isinstance(detail, bytes):
            detail = detail.decode("utf-8", errors="replace")
        return detail or None
    return str(exc) or None
