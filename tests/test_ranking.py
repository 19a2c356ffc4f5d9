"""Tests for the freshness-aware ranking function."""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from linkboard.services.ranking import FRESHNESS_WINDOW, calculate_score, rank

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@dataclass
class Snapshot:
    name: str
    upvotes: int
    downvotes: int
    created_at: datetime


def _link(name: str, up: int, down: int = 0, *, days_ago: float = 0) -> Snapshot:
    return Snapshot(name, up, down, NOW - timedelta(days=days_ago))


def _names(links) -> list[str]:
    return [entry.link.name for entry in links]


def test_calculate_score_can_go_negative() -> None:
    assert calculate_score(2, 1) == 1
    assert calculate_score(0, 3) == -3


def test_fresh_link_beats_old_popular_link() -> None:
    old = _link("old", 100, days_ago=8)
    new = _link("new", 10, days_ago=2)

    ranked = rank([old, new], NOW)

    assert _names(ranked) == ["new", "old"]
    assert ranked[0].score == 10 and ranked[0].is_fresh
    # Old links keep their real score, they just sort later.
    assert ranked[1].score == 100 and not ranked[1].is_fresh


def test_higher_score_first_within_same_freshness() -> None:
    low = _link("low", 3, days_ago=1)
    high = _link("high", 5, days_ago=3)
    stale_low = _link("stale-low", 1, days_ago=30)
    stale_high = _link("stale-high", 9, days_ago=10)

    assert _names(rank([low, stale_low, high, stale_high], NOW)) == [
        "high",
        "low",
        "stale-high",
        "stale-low",
    ]


def test_equal_score_breaks_tie_by_recency() -> None:
    older = _link("older", 4, 1, days_ago=3)
    newer = _link("newer", 3, 0, days_ago=1)

    assert _names(rank([older, newer], NOW)) == ["newer", "older"]


def test_freshness_boundary_is_exclusive() -> None:
    edge = Snapshot("edge", 1, 0, NOW - FRESHNESS_WINDOW)
    inside = Snapshot("inside", 0, 0, NOW - FRESHNESS_WINDOW + timedelta(seconds=1))

    ranked = {entry.link.name: entry for entry in rank([edge, inside], NOW)}

    assert ranked["edge"].is_fresh is False
    assert ranked["inside"].is_fresh is True


def test_custom_freshness_window() -> None:
    link = _link("three-days", 1, days_ago=3)

    assert rank([link], NOW, freshness_window=timedelta(days=2))[0].is_fresh is False
    assert rank([link], NOW, freshness_window=timedelta(days=4))[0].is_fresh is True


def test_negative_scores_sort_below_zero() -> None:
    buried = _link("buried", 1, 5, days_ago=1)
    neutral = _link("neutral", 0, 0, days_ago=2)

    assert _names(rank([buried, neutral], NOW)) == ["neutral", "buried"]


def test_naive_timestamps_are_treated_as_utc() -> None:
    naive = Snapshot("naive", 1, 0, (NOW - timedelta(days=1)).replace(tzinfo=None))

    assert rank([naive], NOW)[0].is_fresh is True


def test_rank_is_deterministic_and_independent_of_input_order() -> None:
    links = [
        _link(f"link-{i}", up=i % 4, down=i % 3, days_ago=(i * 1.7) % 14)
        for i in range(25)
    ]
    expected = _names(rank(links, NOW))

    assert _names(rank(links, NOW)) == expected
    shuffled = links[:]
    random.Random(7).shuffle(shuffled)
    assert _names(rank(shuffled, NOW)) == expected


def test_rank_empty_snapshot() -> None:
    assert rank([], NOW) == []
