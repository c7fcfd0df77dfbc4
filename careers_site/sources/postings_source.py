"""Listing sources — read-only suppliers of the job postings to render.

Two implementations:
- StaticPostingSource: an in-process list (the site's current openings)
- RemotePostingSource: a JSON array fetched from ``LISTINGS_URL``
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

import httpx
from pydantic import ValidationError

from careers_site.errors import ListingSourceError
from careers_site.models.postings import NEW_ROLE_ID, JobPosting, PositionKind

logger = logging.getLogger(__name__)


class PostingSource(Protocol):
    async def list_postings(self) -> list[JobPosting]: ...

    async def get_posting(self, posting_id: str) -> Optional[JobPosting]: ...


# ── Current openings ─────────────────────────────────────────────────────────

DEFAULT_POSTINGS: list[JobPosting] = [
    JobPosting(
        id="event-manager",
        title="Event Manager",
        kind=PositionKind.FULL_TIME,
        location="Ahmedabad / Remote",
        experience="2+ years",
        description=(
            "Plan and execute amazing events. Lead event planning, coordinate with vendors, "
            "manage logistics, and ensure memorable experiences for our attendees."
        ),
    ),
    JobPosting(
        id="marketing-lead",
        title="Marketing Lead",
        kind=PositionKind.FULL_TIME,
        location="Ahmedabad / Remote",
        experience="3+ years",
        description=(
            "Drive marketing strategy and campaigns. Create engaging content, manage social "
            "media, analyze performance metrics, and grow our brand presence."
        ),
    ),
    JobPosting(
        id="content-specialist",
        title="Content Specialist",
        kind=PositionKind.FULL_TIME,
        location="Ahmedabad / Remote",
        experience="1+ years",
        description=(
            "Create engaging content across platforms. Write compelling copy, create social "
            "media content, manage content calendar, and maintain brand voice."
        ),
    ),
    JobPosting(
        id="operations-associate",
        title="Operations Associate",
        kind=PositionKind.FULL_TIME,
        location="Ahmedabad (Onsite)",
        experience="1+ years",
        description=(
            "Keep everything running smoothly. Support day-to-day operations, coordinate "
            "with teams, manage documentation, and ensure efficient processes."
        ),
    ),
    JobPosting(
        id="developer",
        title="Developer (React.js/Next.js)",
        kind=PositionKind.FULL_TIME,
        location="Ahmedabad / Remote",
        experience="2+ years",
        description=(
            "Build our platform and features. Develop responsive web applications, write "
            "clean code, collaborate with team, and maintain high code quality."
        ),
    ),
    JobPosting(
        id="sales-intern",
        title="Inside Sales Intern",
        kind=PositionKind.INTERNSHIP,
        location="Ahmedabad (Onsite)",
        duration="3-6 months",
        description=(
            "Gain hands-on experience in technology sales, business development, and "
            "customer relations. Opportunity for full-time role (PPO) upon completion."
        ),
        tag_color="bg-yellow-500",
    ),
    JobPosting(
        id="ui-designer",
        title="UI/UX Designer",
        kind=PositionKind.FULL_TIME,
        location="Ahmedabad / Remote",
        experience="2+ years",
        description=(
            "Create beautiful user experiences. Design intuitive interfaces, create "
            "prototypes, conduct user research, and collaborate with development team."
        ),
    ),
]


class StaticPostingSource:
    """Postings held in memory; never changes after construction."""

    def __init__(self, postings: list[JobPosting] | None = None) -> None:
        self._postings = list(DEFAULT_POSTINGS if postings is None else postings)

    async def list_postings(self) -> list[JobPosting]:
        return list(self._postings)

    async def get_posting(self, posting_id: str) -> Optional[JobPosting]:
        return next((p for p in self._postings if p.id == posting_id), None)


class RemotePostingSource:
    """Fetches the listing from a remote JSON endpoint on every call."""

    def __init__(self, url: str, timeout: float = 10, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def list_postings(self) -> list[JobPosting]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(self.url)
                resp.raise_for_status()
                raw = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Listing fetch failed: url=%s error=%s", self.url, exc)
            raise ListingSourceError(str(exc)) from exc

        if not isinstance(raw, list):
            raise ListingSourceError(f"Expected a JSON array from {self.url}, got {type(raw).__name__}")

        return _parse_postings(raw)

    async def get_posting(self, posting_id: str) -> Optional[JobPosting]:
        postings = await self.list_postings()
        return next((p for p in postings if p.id == posting_id), None)


def _parse_postings(raw: list[Any]) -> list[JobPosting]:
    """Validate remote entries, skipping the reserved id and malformed rows."""
    postings: list[JobPosting] = []
    for entry in raw:
        if isinstance(entry, dict) and entry.get("id") == NEW_ROLE_ID:
            logger.warning("Listing source returned reserved id '%s', skipped", NEW_ROLE_ID)
            continue
        try:
            postings.append(JobPosting.model_validate(entry))
        except ValidationError as exc:
            logger.warning("Skipping malformed posting %r: %s", entry, exc.errors()[:1])
    return postings


def build_posting_source(listings_url: str = "") -> PostingSource:
    """Remote source when a URL is configured, otherwise the static list."""
    if listings_url:
        logger.info("Using remote listing source: %s", listings_url)
        return RemotePostingSource(listings_url)
    return StaticPostingSource()
