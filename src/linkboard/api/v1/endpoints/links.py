"""Link listing and submission endpoints for the Linkboard API."""

from __future__ import annotations

import html
from collections.abc import Sequence
from datetime import timedelta

from fastapi import APIRouter, status
from fastapi.responses import HTMLResponse

from linkboard.api.v1.dependencies import CaptchaSessionDep, LedgerDep, SessionDep
from linkboard.core.settings import settings
from linkboard.db.time import utcnow
from linkboard.models import Link
from linkboard.schemas.link import LinkCreate, LinkResponse, RankedLinkResponse
from linkboard.services.links import submit_link
from linkboard.services.ranking import RankedLink, rank

router = APIRouter(tags=["links"])


def _ranked_snapshot(ledger: LedgerDep) -> list[RankedLink[Link]]:
    return rank(
        ledger.snapshot(),
        utcnow(),
        freshness_window=timedelta(days=settings.freshness_window_days),
    )


def _render_html(entries: Sequence[RankedLink[Link]]) -> str:
    items = "\n".join(
        '      <li><a href="{url}">{title}</a> <span class="score">{score}</span></li>'.format(
            url=html.escape(entry.link.url, quote=True),
            title=html.escape(entry.link.title),
            score=entry.score,
        )
        for entry in entries
    )
    return f"""<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>All Links</title>
    <style>
      body {{ font-family: sans-serif; background-color: #f0f0f0; color: #333; }}
      ul {{ list-style-type: none; padding: 0; }}
      li {{ background-color: #fff; margin: 0.5em 0; padding: 1em; border-radius: 5px; }}
      a {{ text-decoration: none; color: #007bff; }}
      .score {{ float: right; color: #666; }}
    </style>
  </head>
  <body>
    <h1>All Submitted Links</h1>
    <ul>
{items}
    </ul>
  </body>
</html>
"""


@router.get("/links", response_model=list[RankedLinkResponse])
async def list_links(ledger: LedgerDep) -> list[RankedLinkResponse]:
    """List approved links, fresh links first, then by score and recency."""
    return [
        RankedLinkResponse(
            **LinkResponse.model_validate(entry.link).model_dump(),
            score=entry.score,
            is_fresh=entry.is_fresh,
        )
        for entry in _ranked_snapshot(ledger)
    ]


@router.get("/links.html", response_class=HTMLResponse)
async def list_links_html(ledger: LedgerDep) -> HTMLResponse:
    """Render the ranked listing as a minimal HTML page."""
    return HTMLResponse(_render_html(_ranked_snapshot(ledger)))


@router.post("/links", response_model=LinkResponse, status_code=status.HTTP_201_CREATED)
async def create_link(
    link_data: LinkCreate,
    captcha_session: CaptchaSessionDep,
    db: SessionDep,
) -> Link:
    """Submit a link for moderation.

    Requires a valid CAPTCHA session. New links start as ``pending`` and are
    not listed until approved.
    """
    return submit_link(db, title=link_data.title, url=str(link_data.url))
