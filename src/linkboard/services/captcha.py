"""CAPTCHA session broker.

Turns a one-time human-verification token into a reusable, time-boxed
voting credential bound to a fingerprint of the minting client, and checks
that credential on every protected action.
"""

from __future__ import annotations

import logging
import secrets
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from linkboard.core.settings import DEFAULT_CAPTCHA_SESSION_TTL
from linkboard.services.errors import (
    FingerprintMismatchError,
    MissingTokenError,
    SessionExpiredError,
    SessionNotFoundError,
    VerificationFailedError,
)
from linkboard.services.fingerprint import FingerprintHasher
from linkboard.services.session_store import CaptchaSessionStore, SessionRecord
from linkboard.services.turnstile import VerificationOutcome

logger = logging.getLogger(__name__)


class VerificationGateway(Protocol):
    """Anything that can judge a human-verification token."""

    async def verify(self, token: str, client_ip: str | None = None) -> VerificationOutcome: ...


@dataclass(frozen=True)
class MintedSession:
    """Session handed back to the caller for delivery as a cookie."""

    session_id: str
    ttl_seconds: int
    expires_at: int


def new_session_id() -> str:
    """Return an unguessable session identifier."""
    return secrets.token_urlsafe(32)


class CaptchaSessionBroker:
    """Mint and validate CAPTCHA sessions."""

    def __init__(
        self,
        gateway: VerificationGateway,
        hasher: FingerprintHasher,
        store: CaptchaSessionStore,
        *,
        ttl_seconds: int = DEFAULT_CAPTCHA_SESSION_TTL,
        clock: Callable[[], float] = time.time,
        id_factory: Callable[[], str] = new_session_id,
    ) -> None:
        self._gateway = gateway
        self._hasher = hasher
        self._store = store
        self._ttl_seconds = ttl_seconds if ttl_seconds > 0 else DEFAULT_CAPTCHA_SESSION_TTL
        self._clock = clock
        self._id_factory = id_factory

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    async def mint(
        self,
        token: str | None,
        client_ip: str | None,
        user_agent: str | None,
        *,
        ttl_seconds: int | None = None,
    ) -> MintedSession:
        """Verify ``token`` and persist a new session for this client.

        Raises:
            MissingTokenError: If no token was supplied; the provider is not called.
            VerificationFailedError: If the provider rejected the token.
            VerificationUnavailableError: If the provider could not be reached.
        """
        token = (token or "").strip()
        if not token:
            raise MissingTokenError()

        outcome = await self._gateway.verify(token, client_ip)
        if not outcome.success:
            raise VerificationFailedError(outcome.error_codes)

        ttl = ttl_seconds if ttl_seconds and ttl_seconds > 0 else self._ttl_seconds
        expires_at = int(self._clock()) + ttl
        record = SessionRecord(
            id=self._id_factory(),
            ip_hash=self._hasher.hash(client_ip),
            ua_hash=self._hasher.hash(user_agent),
            expires_at=expires_at,
        )
        self._store.create(record)
        logger.info("Minted CAPTCHA session %s... (ttl %ds)", record.id[:8], ttl)
        return MintedSession(session_id=record.id, ttl_seconds=ttl, expires_at=expires_at)

    def validate(
        self,
        session_id: str | None,
        client_ip: str | None,
        user_agent: str | None,
    ) -> SessionRecord:
        """Return the session record if it is live and belongs to this client.

        Expired sessions are deleted. A fingerprint mismatch leaves the
        session in place, since proxies and NAT can legitimately change it.
        """
        if not session_id:
            raise SessionNotFoundError()

        record = self._store.find(session_id)
        if record is None:
            raise SessionNotFoundError()

        if int(self._clock()) >= record.expires_at:
            self._store.delete(session_id)
            logger.info("CAPTCHA session %s... expired", session_id[:8])
            raise SessionExpiredError()

        ip_ok = self._hasher.matches(client_ip, record.ip_hash)
        ua_ok = self._hasher.matches(user_agent, record.ua_hash)
        if not (ip_ok and ua_ok):
            logger.info(
                "CAPTCHA session %s... fingerprint mismatch (ip=%s, ua=%s)",
                session_id[:8],
                "ok" if ip_ok else "changed",
                "ok" if ua_ok else "changed",
            )
            raise FingerprintMismatchError()

        return record
