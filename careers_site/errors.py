"""Errors raised along the application relay, each mapped to an HTTP status."""

from __future__ import annotations


class RelayError(Exception):
    """Base class, rendered as ``{"success": false, "error": ...}``."""

    status_code: int = 500
    default_message: str = "Failed to submit application. Please try again later."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class SubmissionValidationError(RelayError):
    """Required form fields are missing."""

    status_code = 400
    default_message = "Missing required fields: email, phone, and position are required"


class MailConfigError(RelayError):
    """SMTP host, user or password could not be resolved."""

    default_message = "Email service not configured. Please contact support."


class RecipientConfigError(RelayError):
    """The resolved recipient is not an email address."""

    default_message = (
        "Recipient email not configured. Please set SMTP_TO or ADMIN_EMAIL environment variable."
    )


class DispatchError(RelayError):
    """The SMTP transport rejected or failed to deliver the message."""


class ListingSourceError(Exception):
    """The remote listing source could not be read."""
