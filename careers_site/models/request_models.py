"""Request models for the careers API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from careers_site.models.postings import GeneralApplication, ListedRole, target_from_form


class ResumeFile(BaseModel):
    """An uploaded resume, kept in memory for the lifetime of one request."""

    filename: str = Field(..., examples=["resume.pdf"])
    content: bytes = b""
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


class ApplicationSubmission(BaseModel):
    """One applicant's intake payload as received by the relay."""

    email: str = Field(..., description="Applicant e-mail", examples=["a@b.com"])
    phone: str = Field(..., description="Applicant phone", examples=["+1234567890"])
    position: str = Field(
        ...,
        description="Posting title, or 'new-role' for a general application",
        examples=["Event Manager"],
    )
    position_id: str = Field(default="", examples=["event-manager"])
    resume: Optional[ResumeFile] = None

    @property
    def target(self) -> ListedRole | GeneralApplication:
        return target_from_form(self.position, self.position_id)
