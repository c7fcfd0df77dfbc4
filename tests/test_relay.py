"""POST /api/careers/apply — validation, configuration, composition, dispatch."""

from __future__ import annotations

from email.message import EmailMessage

import pytest

from careers_site.config import resolve_mail_settings
from careers_site.errors import DispatchError
from careers_site.routers.careers_router import get_mailer_factory
from tests.conftest import SAMPLE_APPLICATION, VALID_SMTP, make_settings

APPLY_URL = "/api/careers/apply"


def _text_body(message: EmailMessage) -> str:
    return message.get_body(preferencelist=("plain",)).get_content()


def _html_body(message: EmailMessage) -> str:
    return message.get_body(preferencelist=("html",)).get_content()


# ── Happy path ────────────────────────────────────────────────────────────────


def test_listed_position_end_to_end(client, fake_mailer):
    resp = client.post(APPLY_URL, data=SAMPLE_APPLICATION)

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Application submitted successfully"
    assert body["messageId"]

    assert len(fake_mailer.sent) == 1
    message = fake_mailer.sent[0]
    assert body["messageId"] == message["Message-ID"]
    assert "Event Manager" in message["Subject"]
    assert message["Subject"] == "New Job Application: Event Manager"
    assert message["To"] == "hr@example.com"
    assert message["From"] == "mailer@example.com"

    text = _text_body(message)
    assert "a@b.com" in text
    assert "+1234567890" in text
    assert "Position ID: event-manager" in text
    assert "New Job Application Received" in text

    html = _html_body(message)
    assert 'href="mailto:a@b.com"' in html
    assert 'href="tel:+1234567890"' in html


def test_general_application_framing(client, fake_mailer):
    resp = client.post(
        APPLY_URL,
        data={**SAMPLE_APPLICATION, "position": "new-role", "positionId": "new-role"},
    )

    assert resp.status_code == 200
    message = fake_mailer.sent[0]
    assert message["Subject"] == "New Role Application - General Interest"

    text = _text_body(message)
    assert "New Role Application Received" in text
    assert "General Application (Role Not Listed)" in text
    assert "Position: new-role" not in text


def test_resume_is_attached_verbatim(client, fake_mailer):
    pdf = b"%PDF-1.4\n\x00\x01binary resume bytes\xff"
    resp = client.post(
        APPLY_URL,
        data=SAMPLE_APPLICATION,
        files={"resume": ("resume.pdf", pdf, "application/pdf")},
    )

    assert resp.status_code == 200
    attachments = list(fake_mailer.sent[0].iter_attachments())
    assert len(attachments) == 1
    assert attachments[0].get_filename() == "resume.pdf"
    assert attachments[0].get_content() == pdf


def test_empty_resume_is_not_attached(client, fake_mailer):
    resp = client.post(
        APPLY_URL,
        data=SAMPLE_APPLICATION,
        files={"resume": ("resume.pdf", b"", "application/pdf")},
    )

    assert resp.status_code == 200
    assert list(fake_mailer.sent[0].iter_attachments()) == []


def test_no_resume_means_no_attachment(client, fake_mailer):
    client.post(APPLY_URL, data=SAMPLE_APPLICATION)
    assert list(fake_mailer.sent[0].iter_attachments()) == []


def test_missing_position_id_is_accepted(client, fake_mailer):
    data = {k: v for k, v in SAMPLE_APPLICATION.items() if k != "positionId"}
    resp = client.post(APPLY_URL, data=data)

    assert resp.status_code == 200
    assert "Position ID: \n" in _text_body(fake_mailer.sent[0])


@pytest.mark.parametrize("label", ["Event\nManager", "Event\r\nManager", "Event \n Manager\n"])
def test_line_breaks_in_position_are_folded_in_subject(client, fake_mailer, label):
    resp = client.post(APPLY_URL, data={**SAMPLE_APPLICATION, "position": label})

    assert resp.status_code == 200
    assert len(fake_mailer.sent) == 1
    message = fake_mailer.sent[0]
    assert message["Subject"] == "New Job Application: Event Manager"
    assert "Event" in _text_body(message)
    assert "Manager" in _text_body(message)


# ── Validation (400) ──────────────────────────────────────────────────────────


@pytest.mark.parametrize("missing", ["email", "phone", "position"])
def test_missing_required_field_returns_400(client, fake_mailer, missing):
    data = {k: v for k, v in SAMPLE_APPLICATION.items() if k != missing}
    resp = client.post(APPLY_URL, data=data)

    assert resp.status_code == 400
    assert resp.json() == {
        "success": False,
        "error": "Missing required fields: email, phone, and position are required",
    }
    assert fake_mailer.instances == []
    assert fake_mailer.sent == []


@pytest.mark.parametrize("blank", ["email", "phone", "position"])
def test_blank_required_field_returns_400(client, fake_mailer, blank):
    resp = client.post(APPLY_URL, data={**SAMPLE_APPLICATION, blank: ""})

    assert resp.status_code == 400
    assert fake_mailer.sent == []


def test_validation_runs_before_config_check(make_client, fake_mailer):
    client = make_client(resolve_mail_settings(make_settings()))
    resp = client.post(APPLY_URL, data={"email": "a@b.com"})

    assert resp.status_code == 400


# ── Configuration (500) ───────────────────────────────────────────────────────


@pytest.mark.parametrize("missing", ["smtp_host", "smtp_user", "smtp_pass"])
def test_incomplete_smtp_config_returns_500(make_client, fake_mailer, missing):
    values = {k: v for k, v in VALID_SMTP.items() if k != missing}
    client = make_client(resolve_mail_settings(make_settings(**values)))

    resp = client.post(APPLY_URL, data=SAMPLE_APPLICATION)

    assert resp.status_code == 500
    assert resp.json() == {
        "success": False,
        "error": "Email service not configured. Please contact support.",
    }
    assert fake_mailer.sent == []


def test_smtp_password_alias_is_enough(make_client, fake_mailer):
    values = {k: v for k, v in VALID_SMTP.items() if k != "smtp_pass"}
    client = make_client(resolve_mail_settings(make_settings(**values, smtp_password="alt")))

    resp = client.post(APPLY_URL, data=SAMPLE_APPLICATION)

    assert resp.status_code == 200
    assert fake_mailer.instances[0].settings.password == "alt"


def test_malformed_recipient_returns_500(make_client, fake_mailer):
    client = make_client(resolve_mail_settings(make_settings(**{**VALID_SMTP, "smtp_to": "hr-team"})))

    resp = client.post(APPLY_URL, data=SAMPLE_APPLICATION)

    assert resp.status_code == 500
    assert "SMTP_TO or ADMIN_EMAIL" in resp.json()["error"]
    assert fake_mailer.sent == []


# ── Dispatch (500) ────────────────────────────────────────────────────────────


class _FailingMailer:
    error_text: str | None = "Connection refused"
    calls = 0

    def __init__(self, settings) -> None:
        self.settings = settings

    def send(self, message: EmailMessage) -> str:
        type(self).calls += 1
        raise DispatchError(self.error_text)


def test_dispatch_failure_surfaces_transport_message(client):
    from careers_site.main import app

    _FailingMailer.calls = 0
    _FailingMailer.error_text = "Connection refused"
    app.dependency_overrides[get_mailer_factory] = lambda: _FailingMailer

    resp = client.post(APPLY_URL, data=SAMPLE_APPLICATION)

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Connection refused"}
    assert _FailingMailer.calls == 1


def test_dispatch_failure_without_message_uses_fallback(client):
    from careers_site.main import app

    _FailingMailer.error_text = None
    app.dependency_overrides[get_mailer_factory] = lambda: _FailingMailer

    resp = client.post(APPLY_URL, data=SAMPLE_APPLICATION)

    assert resp.status_code == 500
    assert resp.json()["error"] == "Failed to submit application. Please try again later."
