# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import datetime, timedelta
from typing import Any

import pytest

os.environ.setdefault("FINGERPRINT_SALT", "test-salt")
os.environ.setdefault("TURNSTILE_SECRET_KEY", "1x0000000000000000000000000000000AA")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from linkboard.api.v1.dependencies import get_verification_gateway
from linkboard.db.session import Base
from linkboard.db.session import get_db as app_get_session
from linkboard.db.time import utcnow
from linkboard.main import app as fastapi_app
from linkboard.models import LINK_STATUS_APPROVED, Link
from linkboard.services.turnstile import VerificationOutcome

TEST_DB_URL = "sqlite://"
PASSING_TOKEN = "XXXX.DUMMY.TOKEN.XXXX"


class FakeGateway:
    """Verification gateway double that records every call."""

    def __init__(self, outcome: VerificationOutcome | None = None) -> None:
        self.outcome = outcome or VerificationOutcome(success=True)
        self.error: Exception | None = None
        self.calls: list[tuple[str, str | None]] = []

    async def verify(self, token: str, client_ip: str | None = None) -> VerificationOutcome:
        self.calls.append((token, client_ip))
        if self.error is not None:
            raise self.error
        return self.outcome


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    session_factory: sessionmaker[Session],
    fake_gateway: FakeGateway,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_verification_gateway] = lambda: fake_gateway
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_verification_gateway, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def make_link(db_session: Session) -> Callable[..., Link]:
    """Return a factory persisting links with the given counters and age."""

    def _make_link(
        title: str = "A link",
        url: str = "https://example.com/",
        *,
        upvotes: int = 0,
        downvotes: int = 0,
        status: str = LINK_STATUS_APPROVED,
        age: timedelta = timedelta(0),
        created_at: datetime | None = None,
    ) -> Link:
        link = Link(
            title=title,
            url=url,
            upvotes=upvotes,
            downvotes=downvotes,
            status=status,
            created_at=created_at or utcnow() - age,
        )
        db_session.add(link)
        db_session.commit()
        db_session.refresh(link)
        return link

    return _make_link


@pytest.fixture()
def captcha_session(client: TestClient) -> dict[str, Any]:
    """Mint a CAPTCHA session through the API; the cookie stays on ``client``."""
    response = client.post("/captcha/session", json={"token": PASSING_TOKEN})
    assert response.status_code == 200
    return {"ttl": response.json()["ttl"], "id": client.cookies.get("captcha_session")}
