"""Storage backends for CAPTCHA session records."""

from __future__ import annotations

from dataclasses import dataclass
from threading import Lock
from typing import Protocol

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from linkboard.models import CaptchaSession, LinkVote


@dataclass(frozen=True)
class SessionRecord:
    """Persisted view of a minted CAPTCHA session."""

    id: str
    ip_hash: str
    ua_hash: str
    expires_at: int


class CaptchaSessionStore(Protocol):
    """Create, look up and delete session records by id."""

    def create(self, record: SessionRecord) -> None: ...

    def find(self, session_id: str) -> SessionRecord | None: ...

    def delete(self, session_id: str) -> None: ...

    def purge_expired(self, now: int) -> int: ...


class InMemoryCaptchaSessionStore:
    """Process-local store, used by tests and single-process development."""

    def __init__(self) -> None:
        self._records: dict[str, SessionRecord] = {}
        self._lock = Lock()

    def create(self, record: SessionRecord) -> None:
        with self._lock:
            self._records[record.id] = record

    def find(self, session_id: str) -> SessionRecord | None:
        with self._lock:
            return self._records.get(session_id)

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._records.pop(session_id, None)

    def purge_expired(self, now: int) -> int:
        with self._lock:
            expired = [key for key, record in self._records.items() if record.expires_at <= now]
            for key in expired:
                del self._records[key]
            return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class SqlCaptchaSessionStore:
    """Session store backed by the ``captcha_sessions`` table.

    Each operation is a single statement committed on its own.
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def create(self, record: SessionRecord) -> None:
        self._db.add(
            CaptchaSession(
                id=record.id,
                ip_hash=record.ip_hash,
                ua_hash=record.ua_hash,
                expires_at=record.expires_at,
            )
        )
        self._db.commit()

    def find(self, session_id: str) -> SessionRecord | None:
        row = self._db.get(CaptchaSession, session_id)
        if row is None:
            return None
        return SessionRecord(
            id=row.id,
            ip_hash=row.ip_hash,
            ua_hash=row.ua_hash,
            expires_at=int(row.expires_at),
        )

    def delete(self, session_id: str) -> None:
        # SQLite does not enforce ON DELETE CASCADE unless asked to.
        self._db.execute(delete(LinkVote).where(LinkVote.session_id == session_id))
        self._db.execute(delete(CaptchaSession).where(CaptchaSession.id == session_id))
        self._db.commit()

    def purge_expired(self, now: int) -> int:
        """Delete every session whose expiry is at or before ``now``, with its votes.

        Returns:
            The number of sessions removed.
        """
        expired_ids = select(CaptchaSession.id).where(CaptchaSession.expires_at <= now)
        self._db.execute(
            delete(LinkVote)
            .where(LinkVote.session_id.in_(expired_ids))
            .execution_options(synchronize_session=False)
        )
        result = self._db.execute(
            delete(CaptchaSession)
            .where(CaptchaSession.expires_at <= now)
            .execution_options(synchronize_session=False)
        )
        self._db.commit()
        return result.rowcount
