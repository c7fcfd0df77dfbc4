"""Careers router — /api/careers endpoints (listing + application relay)."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from careers_site.config import MailSettings, resolve_mail_settings
from careers_site.errors import ListingSourceError
from careers_site.models.postings import NEW_ROLE_CARD, NEW_ROLE_ID
from careers_site.models.response_models import (
    ApplyResponse,
    ErrorResponse,
    HealthResponse,
    PostingOut,
)
from careers_site.relay import MailerFactory, relay_application
from careers_site.sources.postings_source import PostingSource, StaticPostingSource
from careers_site.tools.mailer import SmtpMailer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["careers"])


# ── Dependencies ──────────────────────────────────────────────────────────────


def get_mail_settings(request: Request) -> MailSettings:
    """MailSettings resolved once at startup and kept on app.state."""
    mail_settings = getattr(request.app.state, "mail_settings", None)
    if mail_settings is None:
        mail_settings = resolve_mail_settings()
        request.app.state.mail_settings = mail_settings
    return mail_settings


def get_mailer_factory() -> MailerFactory:
    return SmtpMailer


def get_posting_source(request: Request) -> PostingSource:
    source = getattr(request.app.state, "posting_source", None)
    if source is None:
        source = StaticPostingSource()
        request.app.state.posting_source = source
    return source


# ── Endpoints ─────────────────────────────────────────────────────────────────


@router.post(
    "/careers/apply",
    response_model=ApplyResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def apply(
    request: Request,
    mail_settings: MailSettings = Depends(get_mail_settings),
    mailer_factory: MailerFactory = Depends(get_mailer_factory),
) -> ApplyResponse:
    """Relay a multipart application (email, phone, position, positionId, resume) by e-mail."""
    async with request.form() as form:
        return await relay_application(form, mail_settings, mailer_factory)


@router.get("/careers/positions", response_model=list[PostingOut])
async def list_positions(source: PostingSource = Depends(get_posting_source)) -> list[PostingOut]:
    """Open postings, followed by the general-application entry."""
    try:
        postings = await source.list_postings()
    except ListingSourceError as exc:
        raise HTTPException(status_code=502, detail="Job listings are temporarily unavailable") from exc

    cards = [PostingOut(**p.model_dump(mode="json", by_alias=True)) for p in postings]
    cards.append(PostingOut(**NEW_ROLE_CARD))
    return cards


@router.get("/careers/positions/{position_id}", response_model=PostingOut)
async def get_position(position_id: str, source: PostingSource = Depends(get_posting_source)) -> PostingOut:
    """A single posting, used to open the apply modal from ``?position=<id>``."""
    if position_id == NEW_ROLE_ID:
        return PostingOut(**NEW_ROLE_CARD)

    try:
        posting = await source.get_posting(position_id)
    except ListingSourceError as exc:
        raise HTTPException(status_code=502, detail="Job listings are temporarily unavailable") from exc

    if posting is None:
        raise HTTPException(status_code=404, detail=f"Position '{position_id}' not found")
    return PostingOut(**posting.model_dump(mode="json", by_alias=True))


@router.get("/health", response_model=HealthResponse)
async def health_check(mail_settings: MailSettings = Depends(get_mail_settings)) -> HealthResponse:
    """Simple liveness probe."""
    return HealthResponse(mail_configured=mail_settings.is_complete)
