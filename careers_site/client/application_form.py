"""Application form client.

Holds the applicant's input for one target posting and submits it to the
relay as multipart/form-data. Three failure modes are kept apart:
- FormValidationError: email or phone missing, nothing was sent
- SubmissionRejected: the relay answered with an error envelope
- SubmissionFailed: the request never completed
Failures leave the fields populated so the user can correct and resubmit.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import httpx

from careers_site.models.postings import GeneralApplication, JobPosting, ListedRole
from careers_site.models.request_models import ResumeFile

logger = logging.getLogger(__name__)

APPLY_PATH = "/api/careers/apply"

MISSING_INFO_MESSAGE = "Please fill in your email and phone number."
REJECTED_FALLBACK_MESSAGE = "Failed to submit application"
FAILED_MESSAGE = "There was an error submitting your application. Please try again."


class FormError(Exception):
    """Base class for errors surfaced to the applicant."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class FormValidationError(FormError):
    """Local presence check failed; no request was sent."""


class SubmissionInProgress(FormError):
    """A submission for this form is already in flight."""


class SubmissionRejected(FormError):
    """The relay returned a non-success response."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class SubmissionFailed(FormError):
    """The request failed to complete (network error, unreadable reply)."""


class ApplicationForm:
    """Client-side state and submit logic for one apply modal."""

    def __init__(
        self,
        position: JobPosting | ListedRole | GeneralApplication,
        base_url: str = "http://localhost:8000",
        on_success: Optional[Callable[[dict[str, Any]], None]] = None,
        timeout: float = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.target = position.as_target() if isinstance(position, JobPosting) else position
        self.base_url = base_url
        self.on_success = on_success
        self.timeout = timeout
        self._transport = transport

        self.email = ""
        self.phone = ""
        self.resume: Optional[ResumeFile] = None
        self.is_submitting = False
        self.error: Optional[str] = None

    @property
    def title(self) -> str:
        if self.target.is_general:
            return "Apply for a New Role"
        return f"Apply for {self.target.label}"

    @property
    def submit_label(self) -> str:
        return "Submitting..." if self.is_submitting else "Submit Application"

    def reset(self) -> None:
        self.email = ""
        self.phone = ""
        self.resume = None
        self.error = None

    def form_fields(self) -> dict[str, str]:
        """Text parts of the multipart body."""
        return {
            "email": self.email,
            "phone": self.phone,
            "position": self.target.label,
            "positionId": self.target.position_id,
        }

    def multipart_parts(self) -> list[tuple[str, tuple[Optional[str], bytes, Optional[str]]]]:
        """Every field as a multipart part; text fields carry no filename."""
        parts = [(name, (None, value.encode("utf-8"), None)) for name, value in self.form_fields().items()]
        if self.resume is not None:
            parts.append(
                (
                    "resume",
                    (
                        self.resume.filename,
                        self.resume.content,
                        self.resume.content_type or "application/octet-stream",
                    ),
                )
            )
        return parts

    # ── Submit ────────────────────────────────────────────────────────────

    async def submit(self) -> dict[str, Any]:
        """Send the application once; returns the relay's JSON on success."""
        if self.is_submitting:
            raise SubmissionInProgress("Your application is already being submitted.")

        if not self.email or not self.phone:
            self.error = MISSING_INFO_MESSAGE
            raise FormValidationError(MISSING_INFO_MESSAGE)

        self.is_submitting = True
        self.error = None
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                resp = await client.post(APPLY_PATH, files=self.multipart_parts())
            result = self._parse_reply(resp)
        except FormError as exc:
            self.error = exc.message
            raise
        except httpx.HTTPError as exc:
            logger.warning("Application submit failed: %s", exc)
            self.error = FAILED_MESSAGE
            raise SubmissionFailed(FAILED_MESSAGE) from exc
        finally:
            self.is_submitting = False

        self.reset()
        if self.on_success is not None:
            self.on_success(result)
        return result

    @staticmethod
    def _parse_reply(resp: httpx.Response) -> dict[str, Any]:
        try:
            result = resp.json()
        except ValueError as exc:
            raise SubmissionFailed(FAILED_MESSAGE) from exc

        if not isinstance(result, dict):
            raise SubmissionFailed(FAILED_MESSAGE)

        if resp.is_success and result.get("success", True) is not False:
            return result

        message = result.get("error") or REJECTED_FALLBACK_MESSAGE
        raise SubmissionRejected(str(message), status_code=resp.status_code)
