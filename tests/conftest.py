"""Shared pytest fixtures for the careers site test suite."""

from __future__ import annotations

import os
from email.message import EmailMessage

import pytest
from fastapi.testclient import TestClient

# Ensure test environment variables are set BEFORE importing app modules
for _key in ("SMTP_HOST", "SMTP_USER", "SMTP_PASS", "SMTP_PASSWORD", "SMTP_FROM", "SMTP_TO", "ADMIN_EMAIL"):
    os.environ.pop(_key, None)
os.environ.setdefault("LISTINGS_URL", "")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from careers_site.config import MailSettings, Settings, resolve_mail_settings  # noqa: E402


VALID_SMTP = {
    "smtp_host": "smtp.example.com",
    "smtp_port": 587,
    "smtp_user": "mailer@example.com",
    "smtp_pass": "s3cret",
    "smtp_to": "hr@example.com",
}

SAMPLE_APPLICATION = {
    "email": "a@b.com",
    "phone": "+1234567890",
    "position": "Event Manager",
    "positionId": "event-manager",
}


def make_settings(**overrides) -> Settings:
    """Settings built only from keyword arguments (no .env, no environment)."""
    return Settings(_env_file=None, **overrides)


class FakeMailer:
    """Records every message instead of talking to an SMTP server."""

    sent: list[EmailMessage] = []
    instances: list["FakeMailer"] = []

    def __init__(self, settings: MailSettings) -> None:
        self.settings = settings
        FakeMailer.instances.append(self)

    def send(self, message: EmailMessage) -> str:
        FakeMailer.sent.append(message)
        return str(message["Message-ID"])

    @classmethod
    def reset(cls) -> None:
        cls.sent = []
        cls.instances = []


@pytest.fixture
def fake_mailer():
    FakeMailer.reset()
    yield FakeMailer
    FakeMailer.reset()


@pytest.fixture
def mail_settings() -> MailSettings:
    return resolve_mail_settings(make_settings(**VALID_SMTP))


@pytest.fixture
def make_client(fake_mailer):
    """Factory for a TestClient wired to the given MailSettings and FakeMailer."""
    from careers_site.main import app
    from careers_site.routers.careers_router import get_mail_settings, get_mailer_factory

    def _make(mail_settings: MailSettings) -> TestClient:
        app.dependency_overrides[get_mail_settings] = lambda: mail_settings
        app.dependency_overrides[get_mailer_factory] = lambda: fake_mailer
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client, mail_settings) -> TestClient:
    """FastAPI synchronous test client with a complete SMTP configuration."""
    return make_client(mail_settings)
