"""Subject and body templates for the application notification e-mail."""

from __future__ import annotations

import html
from datetime import datetime

from careers_site.models.postings import GeneralApplication, ListedRole

GENERAL_SUBJECT = "New Role Application - General Interest"
LISTED_SUBJECT_TEMPLATE = "New Job Application: {position}"

GENERAL_HEADING = "New Role Application Received"
LISTED_HEADING = "New Job Application Received"

TEXT_TEMPLATE = """{heading}

Position: {position}
Position ID: {position_id}
Email: {email}
Phone: {phone}

Application submitted at: {submitted_at}"""

HTML_TEMPLATE = """<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #333; border-bottom: 2px solid #000; padding-bottom: 10px;">
    {heading}
  </h2>
  <div style="margin-top: 20px;">
    <p><strong>Position:</strong> {position}</p>
    <p><strong>Position ID:</strong> {position_id}</p>
    <p><strong>Email:</strong> <a href="mailto:{email}">{email}</a></p>
    <p><strong>Phone:</strong> <a href="tel:{phone}">{phone}</a></p>
    <p><strong>Application Date:</strong> {submitted_at}</p>
  </div>
</div>"""


def format_timestamp(moment: datetime) -> str:
    """Human-readable local timestamp, e.g. ``17/10/2026, 14:05:09``."""
    return moment.strftime("%d/%m/%Y, %H:%M:%S")


def build_subject(target: ListedRole | GeneralApplication) -> str:
    if target.is_general:
        return GENERAL_SUBJECT
    # Header values may not carry line breaks
    return LISTED_SUBJECT_TEMPLATE.format(position=" ".join(target.label.split()))


def _fields(
    target: ListedRole | GeneralApplication,
    position_id: str,
    email: str,
    phone: str,
    submitted_at: datetime,
) -> dict[str, str]:
    return {
        "heading": GENERAL_HEADING if target.is_general else LISTED_HEADING,
        "position": target.display_name,
        "position_id": position_id,
        "email": email,
        "phone": phone,
        "submitted_at": format_timestamp(submitted_at),
    }


def build_text_body(
    target: ListedRole | GeneralApplication,
    position_id: str,
    email: str,
    phone: str,
    submitted_at: datetime,
) -> str:
    """Plain-text variant of the notification body."""
    return TEXT_TEMPLATE.format(**_fields(target, position_id, email, phone, submitted_at))


def build_html_body(
    target: ListedRole | GeneralApplication,
    position_id: str,
    email: str,
    phone: str,
    submitted_at: datetime,
) -> str:
    """HTML variant with mailto/tel links; every value is escaped."""
    fields = _fields(target, position_id, email, phone, submitted_at)
    return HTML_TEMPLATE.format(**{k: html.escape(v, quote=True) for k, v in fields.items()})
