"""Shared API dependencies for client identification and CAPTCHA sessions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from linkboard.core.settings import settings
from linkboard.db.session import get_db
from linkboard.services.captcha import CaptchaSessionBroker, VerificationGateway
from linkboard.services.fingerprint import FingerprintHasher
from linkboard.services.ledger import VoteLedger
from linkboard.services.session_store import (
    CaptchaSessionStore,
    SessionRecord,
    SqlCaptchaSessionStore,
)
from linkboard.services.turnstile import TurnstileGateway

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]

_gateway: TurnstileGateway | None = None


@dataclass(frozen=True)
class ClientIdentity:
    """Raw identifiers of the calling client; only ever hashed before storage."""

    ip: str
    user_agent: str


def get_client_identity(request: Request) -> ClientIdentity:
    """Read the client IP and user-agent from the request.

    When proxy headers are trusted, the IP comes from the configured proxy
    header, then the first ``X-Forwarded-For`` hop, then the socket peer.
    Otherwise only the socket peer is used.
    """
    ip = ""
    if settings.trust_proxy_headers:
        ip = request.headers.get(settings.client_ip_header, "").strip()
        if not ip:
            forwarded = request.headers.get("x-forwarded-for", "")
            ip = forwarded.split(",")[0].strip()
    if not ip and request.client is not None:
        ip = request.client.host
    return ClientIdentity(ip=ip, user_agent=request.headers.get("user-agent", ""))


def get_verification_gateway() -> VerificationGateway:
    """Return the shared Turnstile gateway."""
    global _gateway
    if _gateway is None:
        _gateway = TurnstileGateway(
            settings.turnstile_secret_key,
            verify_url=settings.turnstile_verify_url,
            timeout_seconds=settings.turnstile_timeout_seconds,
        )
    return _gateway


async def close_verification_gateway() -> None:
    """Release the shared gateway's HTTP client."""
    global _gateway
    if _gateway is not None:
        await _gateway.close()
        _gateway = None


def get_fingerprint_hasher() -> FingerprintHasher:
    """Return a hasher salted with the configured secret."""
    return FingerprintHasher(settings.fingerprint_salt)


def get_session_store(db: SessionDep) -> CaptchaSessionStore:
    """Return the table-backed session store for this request."""
    return SqlCaptchaSessionStore(db)


ClientIdentityDep = Annotated[ClientIdentity, Depends(get_client_identity)]
GatewayDep = Annotated[VerificationGateway, Depends(get_verification_gateway)]
HasherDep = Annotated[FingerprintHasher, Depends(get_fingerprint_hasher)]
SessionStoreDep = Annotated[CaptchaSessionStore, Depends(get_session_store)]


def get_session_broker(
    gateway: GatewayDep,
    hasher: HasherDep,
    store: SessionStoreDep,
) -> CaptchaSessionBroker:
    """Assemble the session broker from its collaborators."""
    return CaptchaSessionBroker(
        gateway,
        hasher,
        store,
        ttl_seconds=settings.captcha_session_ttl_seconds,
    )


BrokerDep = Annotated[CaptchaSessionBroker, Depends(get_session_broker)]


def require_captcha_session(
    request: Request,
    broker: BrokerDep,
    client: ClientIdentityDep,
) -> SessionRecord:
    """Validate the session cookie against the calling client.

    Raises:
        CaptchaError: Rendered as 403 with the matching reason code.
    """
    session_id = request.cookies.get(settings.captcha_cookie_name)
    return broker.validate(session_id, client.ip, client.user_agent)


def get_vote_ledger(db: SessionDep) -> VoteLedger:
    """Return a ledger bound to this request's database session."""
    return VoteLedger(db)


CaptchaSessionDep = Annotated[SessionRecord, Depends(require_captcha_session)]
LedgerDep = Annotated[VoteLedger, Depends(get_vote_ledger)]
