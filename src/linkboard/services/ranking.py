"""Freshness-aware ranking of links.

Pure computation over an already fetched snapshot: links younger than the
freshness window always precede older ones, then higher net score wins, then
the more recent link.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Generic, Protocol, TypeVar

from linkboard.db.time import as_utc

FRESHNESS_WINDOW = timedelta(days=7)


class Rankable(Protocol):
    upvotes: int
    downvotes: int
    created_at: datetime


T = TypeVar("T", bound=Rankable)


@dataclass(frozen=True)
class RankedLink(Generic[T]):
    """A link annotated with its computed score and freshness."""

    link: T
    score: int
    is_fresh: bool


def calculate_score(upvotes: int, downvotes: int) -> int:
    """Return the net score; negative when downvotes dominate."""
    return upvotes - downvotes


def rank(
    links: Iterable[T],
    now: datetime,
    *,
    freshness_window: timedelta = FRESHNESS_WINDOW,
) -> list[RankedLink[T]]:
    """Order ``links`` fresh-first, then by score, then by recency."""
    now = as_utc(now)
    ranked = []
    for link in links:
        created_at = as_utc(link.created_at)
        ranked.append(
            (
                RankedLink(
                    link=link,
                    score=calculate_score(link.upvotes, link.downvotes),
                    is_fresh=(now - created_at) < freshness_window,
                ),
                created_at,
            )
        )

    ranked.sort(key=lambda item: (not item[0].is_fresh, -item[0].score, -item[1].timestamp()))
    return [entry for entry, _ in ranked]
