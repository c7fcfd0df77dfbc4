"""Application configuration loaded from environment variables."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from careers_site.errors import MailConfigError, RecipientConfigError

logger = logging.getLogger(__name__)

DEFAULT_MAILBOX = "info@thejaayveeworld.com"
IMPLICIT_TLS_PORT = 465


class Settings(BaseSettings):
    """Central settings – values come from .env or environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # SMTP relay
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_pass: str = ""
    smtp_password: str = ""
    smtp_from: str = ""
    smtp_to: str = ""
    admin_email: str = ""
    smtp_timeout: Optional[float] = None

    # Listings
    listings_url: str = ""

    # App
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Return cached singleton settings instance."""
    return Settings()


class MailSettings(BaseModel):
    """SMTP settings with every fallback chain already resolved.

    Built once at startup by :func:`resolve_mail_settings` and handed to the
    relay; nothing downstream reads the environment again.
    """

    model_config = ConfigDict(frozen=True)

    host: str = ""
    port: int = 587
    user: str = ""
    password: str = ""
    sender: str = DEFAULT_MAILBOX
    recipient: str = DEFAULT_MAILBOX
    timeout: Optional[float] = None

    # Presence flags for diagnostics, never the values themselves
    present_keys: dict[str, bool] = {}

    @property
    def implicit_tls(self) -> bool:
        return self.port == IMPLICIT_TLS_PORT

    @property
    def is_complete(self) -> bool:
        return bool(self.host and self.user and self.password)

    def ensure_ready(self) -> None:
        """Raise if the relay cannot dispatch with these settings."""
        if not self.is_complete:
            logger.error(
                "SMTP configuration missing: has_host=%s has_user=%s has_password=%s keys=%s",
                bool(self.host),
                bool(self.user),
                bool(self.password),
                self.present_keys,
            )
            raise MailConfigError()

        if "@" not in self.recipient:
            logger.error(
                "Invalid recipient email %r: keys=%s",
                self.recipient,
                {k: self.present_keys.get(k, False) for k in ("SMTP_TO", "ADMIN_EMAIL", "SMTP_FROM", "SMTP_USER")},
            )
            raise RecipientConfigError()


def resolve_mail_settings(settings: Settings | None = None) -> MailSettings:
    """Collapse the SMTP_* fallback chains into one MailSettings object.

    Precedence:
        password  : SMTP_PASS > SMTP_PASSWORD
        sender    : SMTP_FROM > SMTP_USER > default mailbox
        recipient : SMTP_TO > ADMIN_EMAIL > SMTP_FROM > SMTP_USER > default mailbox
    """
    settings = settings or get_settings()

    return MailSettings(
        host=settings.smtp_host,
        port=settings.smtp_port,
        user=settings.smtp_user,
        password=settings.smtp_pass or settings.smtp_password,
        sender=settings.smtp_from or settings.smtp_user or DEFAULT_MAILBOX,
        recipient=(
            settings.smtp_to
            or settings.admin_email
            or settings.smtp_from
            or settings.smtp_user
            or DEFAULT_MAILBOX
        ),
        timeout=settings.smtp_timeout,
        present_keys={
            "SMTP_HOST": bool(settings.smtp_host),
            "SMTP_PORT": "smtp_port" in settings.model_fields_set,
            "SMTP_USER": bool(settings.smtp_user),
            "SMTP_PASS": bool(settings.smtp_pass),
            "SMTP_PASSWORD": bool(settings.smtp_password),
            "SMTP_FROM": bool(settings.smtp_from),
            "SMTP_TO": bool(settings.smtp_to),
            "ADMIN_EMAIL": bool(settings.admin_email),
        },
    )


def setup_logging() -> None:
    """Configure root logger based on settings."""
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
