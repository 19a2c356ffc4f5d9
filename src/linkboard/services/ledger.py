"""Vote ledger: single-step adjustments of per-link counters."""

from __future__ import annotations

import logging
from enum import Enum

from sqlalchemy import update
from sqlalchemy.orm import Session

from linkboard.models import LINK_STATUS_APPROVED, Link

logger = logging.getLogger(__name__)


class Counter(str, Enum):
    """Vote counters held on a link."""

    UPVOTES = "upvotes"
    DOWNVOTES = "downvotes"


class AdjustResult(Enum):
    """Outcome of a counter adjustment."""

    APPLIED = "applied"
    NOT_FOUND = "not_found"
    # A decrement hit a counter that is already zero.
    NO_OP = "no_op"


class VoteLedger:
    """Apply +1/-1 deltas to link counters as atomic single-row updates.

    Adjustments are issued as ``SET counter = counter + delta`` so concurrent
    votes on the same link never lose an update. The caller owns the commit.
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def adjust(self, link_id: int, counter: Counter, delta: int) -> AdjustResult:
        """Move ``counter`` on ``link_id`` by ``delta``; decrements stop at zero."""
        if delta not in (1, -1):
            raise ValueError(f"delta must be +1 or -1, got {delta!r}")

        counter = Counter(counter)
        column = getattr(Link, counter.value)
        stmt = update(Link).where(Link.id == link_id)
        if delta < 0:
            stmt = stmt.where(column > 0)
        stmt = stmt.values({column: column + delta}).execution_options(
            synchronize_session=False
        )

        result = self._db.execute(stmt)
        if result.rowcount:
            return AdjustResult.APPLIED

        if self._db.get(Link, link_id) is None:
            return AdjustResult.NOT_FOUND
        logger.info("Ignored %s decrement on link %d: counter already zero", counter.value, link_id)
        return AdjustResult.NO_OP

    def snapshot(self) -> list[Link]:
        """Return every approved link with its current counters."""
        return (
            self._db.query(Link)
            .filter(Link.status == LINK_STATUS_APPROVED)
            .order_by(Link.created_at.desc(), Link.id.desc())
            .all()
        )
