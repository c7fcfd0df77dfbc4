"""Submission relay — turns one multipart application into one e-mail.

Flow (first failing step wins):
1. Parse the form and check email / phone / position are present   → 400
2. Check the SMTP settings are complete and the recipient is usable → 500
3. Compose the text + HTML message, attaching the resume if non-empty
4. Dispatch through the mailer                                      → 500 on failure
"""

from __future__ import annotations

import logging
from datetime import datetime
from email.message import EmailMessage
from email.utils import formatdate, make_msgid
from typing import Any, Callable, Protocol

from starlette.concurrency import run_in_threadpool
from starlette.datastructures import FormData, UploadFile

from careers_site.config import MailSettings
from careers_site.errors import SubmissionValidationError
from careers_site.models.request_models import ApplicationSubmission, ResumeFile
from careers_site.models.response_models import ApplyResponse
from careers_site.templates.application_email import (
    build_html_body,
    build_subject,
    build_text_body,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("email", "phone", "position")


class Mailer(Protocol):
    def send(self, message: EmailMessage) -> str: ...


MailerFactory = Callable[[MailSettings], Mailer]


def _text_field(form: FormData, name: str) -> str:
    value = form.get(name)
    if isinstance(value, str):
        return value
    return ""


async def parse_submission(form: FormData) -> ApplicationSubmission:
    """Build an ApplicationSubmission from raw multipart form data.

    A zero-byte resume part is treated as no resume at all.
    """
    values = {name: _text_field(form, name) for name in REQUIRED_FIELDS}
    missing = [name for name, value in values.items() if not value]
    if missing:
        logger.info("Application rejected: missing fields %s", missing)
        raise SubmissionValidationError()

    resume: ResumeFile | None = None
    upload = form.get("resume")
    if isinstance(upload, UploadFile):
        content = await upload.read()
        if content:
            resume = ResumeFile(
                filename=upload.filename or "resume",
                content=content,
                content_type=upload.content_type,
            )

    return ApplicationSubmission(
        email=values["email"],
        phone=values["phone"],
        position=values["position"],
        position_id=_text_field(form, "positionId"),
        resume=resume,
    )


def compose_message(
    submission: ApplicationSubmission,
    mail_settings: MailSettings,
    now: datetime | None = None,
) -> EmailMessage:
    """Build the notification e-mail for one submission."""
    now = now or datetime.now()
    target = submission.target
    body_args: dict[str, Any] = {
        "target": target,
        "position_id": submission.position_id,
        "email": submission.email,
        "phone": submission.phone,
        "submitted_at": now,
    }

    message = EmailMessage()
    message["From"] = mail_settings.sender
    message["To"] = mail_settings.recipient
    message["Subject"] = build_subject(target)
    message["Date"] = formatdate(localtime=True)
    _, _, sender_domain = mail_settings.sender.rpartition("@")
    message["Message-ID"] = make_msgid(domain=sender_domain or None)

    message.set_content(build_text_body(**body_args))
    message.add_alternative(build_html_body(**body_args), subtype="html")

    if submission.resume is not None and submission.resume.size > 0:
        maintype, _, subtype = (submission.resume.content_type or "application/octet-stream").partition("/")
        if not subtype or maintype in ("multipart", "message"):
            maintype, subtype = "application", "octet-stream"
        message.add_attachment(
            submission.resume.content,
            maintype=maintype,
            subtype=subtype,
            filename=submission.resume.filename,
        )

    return message


async def relay_application(
    form: FormData,
    mail_settings: MailSettings,
    mailer_factory: MailerFactory,
) -> ApplyResponse:
    """End-to-end pipeline for one request; holds no state between calls."""
    submission = await parse_submission(form)
    logger.info(
        "Application received: position=%r position_id=%r resume=%s",
        submission.position,
        submission.position_id,
        submission.resume is not None,
    )

    mail_settings.ensure_ready()

    message = compose_message(submission, mail_settings)
    mailer = mailer_factory(mail_settings)
    message_id = await run_in_threadpool(mailer.send, message)

    return ApplyResponse(message_id=message_id)
