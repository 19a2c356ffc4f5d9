"""Link submission and moderation helpers."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from linkboard.models import LINK_STATUS_APPROVED, LINK_STATUS_PENDING, Link

logger = logging.getLogger(__name__)


def submit_link(db: Session, *, title: str, url: str) -> Link:
    """Insert a new pending link with zeroed counters."""
    link = Link(title=title, url=url, upvotes=0, downvotes=0, status=LINK_STATUS_PENDING)
    db.add(link)
    db.commit()
    db.refresh(link)
    logger.info("Link %d submitted and awaiting approval", link.id)
    return link


def list_pending(db: Session) -> list[Link]:
    """Return links awaiting moderation, oldest first."""
    return (
        db.query(Link)
        .filter(Link.status == LINK_STATUS_PENDING)
        .order_by(Link.created_at.asc(), Link.id.asc())
        .all()
    )


def approve_link(db: Session, link_id: int) -> Link | None:
    """Mark a link as approved; return None if it does not exist."""
    link = db.get(Link, link_id)
    if link is None:
        return None
    link.status = LINK_STATUS_APPROVED
    db.commit()
    db.refresh(link)
    logger.info("Link %d approved", link_id)
    return link
