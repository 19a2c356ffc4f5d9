"""Tests for CAPTCHA session storage backends."""

from __future__ import annotations

import pytest

from linkboard.models import CaptchaSession, LinkVote
from linkboard.services.session_store import (
    InMemoryCaptchaSessionStore,
    SessionRecord,
    SqlCaptchaSessionStore,
)

RECORD = SessionRecord(id="sess-1", ip_hash="a" * 64, ua_hash="b" * 64, expires_at=1_700_000_600)
STALE = SessionRecord(id="sess-old", ip_hash="c" * 64, ua_hash="d" * 64, expires_at=1_700_000_000)


@pytest.fixture(params=["memory", "sql"])
def store(request, db_session):
    if request.param == "memory":
        return InMemoryCaptchaSessionStore()
    return SqlCaptchaSessionStore(db_session)


def test_create_find_delete(store) -> None:
    assert store.find(RECORD.id) is None

    store.create(RECORD)
    assert store.find(RECORD.id) == RECORD

    store.delete(RECORD.id)
    assert store.find(RECORD.id) is None


def test_delete_unknown_is_noop(store) -> None:
    store.delete("missing")
    assert store.find("missing") is None


def test_sql_delete_drops_votes_held_by_session(db_session, make_link) -> None:
    link = make_link()
    store = SqlCaptchaSessionStore(db_session)
    store.create(RECORD)
    db_session.add(LinkVote(session_id=RECORD.id, link_id=link.id, direction=1))
    db_session.commit()

    store.delete(RECORD.id)

    assert db_session.query(LinkVote).count() == 0
    assert db_session.get(CaptchaSession, RECORD.id) is None


def test_purge_expired_keeps_live_sessions(store) -> None:
    store.create(RECORD)
    store.create(STALE)

    assert store.purge_expired(1_700_000_000) == 1

    assert store.find("sess-old") is None
    assert store.find(RECORD.id) == RECORD
    assert store.purge_expired(1_700_000_000) == 0


def test_sql_purge_drops_votes_of_expired_sessions(db_session, make_link) -> None:
    link = make_link()
    store = SqlCaptchaSessionStore(db_session)
    store.create(RECORD)
    store.create(STALE)
    db_session.add_all(
        [
            LinkVote(session_id=RECORD.id, link_id=link.id, direction=1),
            LinkVote(session_id="sess-old", link_id=link.id, direction=-1),
        ]
    )
    db_session.commit()

    assert store.purge_expired(1_700_000_300) == 1

    db_session.expire_all()
    assert [vote.session_id for vote in db_session.query(LinkVote).all()] == [RECORD.id]
    assert db_session.get(CaptchaSession, "sess-old") is None
