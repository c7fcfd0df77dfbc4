"""Response models for the careers API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ApplyResponse(BaseModel):
    """Returned by POST /api/careers/apply on success."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str = "Application submitted successfully"
    message_id: str = Field(..., alias="messageId", description="Message-ID of the relayed e-mail")


class ErrorResponse(BaseModel):
    """Error envelope shared by every failing careers endpoint."""

    success: bool = False
    error: str


class PostingOut(BaseModel):
    """A posting as exposed to the page."""

    id: str
    title: str
    type: str
    location: str = ""
    experience: Optional[str] = None
    duration: Optional[str] = None
    description: str = ""
    tagColor: str = "bg-blue-500"


class HealthResponse(BaseModel):
    """Health-check response."""

    status: str = "ok"
    version: str = "1.0.0"
    mail_configured: bool = False
