#!/usr/bin/env python3
"""submit_application.py — Submit one application against a running server.

Usage:
    python scripts/submit_application.py --email a@b.com --phone +1234567890 --position event-manager
    python scripts/submit_application.py --email a@b.com --phone +1234567890 --resume cv.pdf
    python scripts/submit_application.py --base-url http://localhost:8000 --list
"""

from __future__ import annotations

import argparse
import asyncio
import mimetypes
import sys
from pathlib import Path

import httpx

from careers_site.client.application_form import ApplicationForm, FormError
from careers_site.models.postings import NEW_ROLE_ID, GeneralApplication, JobPosting
from careers_site.models.request_models import ResumeFile


def list_positions(base_url: str) -> None:
    resp = httpx.get(f"{base_url}/api/careers/positions", timeout=10)
    resp.raise_for_status()
    for card in resp.json():
        print(f"  {card['id']:<24} {card['title']:<32} {card['type']:<12} {card['location']}")


def load_target(base_url: str, position_id: str) -> JobPosting | GeneralApplication:
    if position_id == NEW_ROLE_ID:
        return GeneralApplication()
    resp = httpx.get(f"{base_url}/api/careers/positions/{position_id}", timeout=10)
    resp.raise_for_status()
    return JobPosting.model_validate(resp.json())


async def submit(args: argparse.Namespace) -> int:
    target = load_target(args.base_url, args.position)
    form = ApplicationForm(
        target,
        base_url=args.base_url,
        on_success=lambda result: print(f"✅ Submitted — messageId={result.get('messageId')}"),
    )
    print(f"{form.title}")
    form.email = args.email
    form.phone = args.phone
    if args.resume:
        path = Path(args.resume)
        form.resume = ResumeFile(
            filename=path.name,
            content=path.read_bytes(),
            content_type=mimetypes.guess_type(path.name)[0],
        )

    try:
        await form.submit()
    except FormError as exc:
        print(f"❌ {exc.message}")
        return 1
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Submit a careers application")
    parser.add_argument("--base-url", default="http://localhost:8000", help="API base URL")
    parser.add_argument("--list", action="store_true", help="List open positions and exit")
    parser.add_argument("--email", default="")
    parser.add_argument("--phone", default="")
    parser.add_argument("--position", default=NEW_ROLE_ID, help="Posting id, or 'new-role'")
    parser.add_argument("--resume", help="Path to a resume file (optional)")
    args = parser.parse_args()

    if args.list:
        list_positions(args.base_url)
        sys.exit(0)
    sys.exit(asyncio.run(submit(args)))
