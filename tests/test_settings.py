"""Tests for configuration parsing."""

import pytest

from linkboard.core.settings import DEFAULT_CAPTCHA_SESSION_TTL, Settings

REQUIRED = {"FINGERPRINT_SALT": "salt", "TURNSTILE_SECRET_KEY": "secret"}


@pytest.mark.parametrize("raw", ["", "   ", "ten minutes", "0", "-30"])
def test_session_ttl_falls_back_to_default(monkeypatch, raw: str) -> None:
    for key, value in REQUIRED.items():
        monkeypatch.setenv(key, value)
    monkeypatch.setenv("CAPTCHA_SESSION_TTL", raw)

    assert Settings(_env_file=None).captcha_session_ttl_seconds == DEFAULT_CAPTCHA_SESSION_TTL


def test_session_ttl_override(monkeypatch) -> None:
    for key, value in REQUIRED.items():
        monkeypatch.setenv(key, value)
    monkeypatch.setenv("CAPTCHA_SESSION_TTL", "120")

    assert Settings(_env_file=None).captcha_session_ttl_seconds == 120


def test_session_ttl_default_when_unset(monkeypatch) -> None:
    for key, value in REQUIRED.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv("CAPTCHA_SESSION_TTL", raising=False)

    assert Settings(_env_file=None).captcha_session_ttl_seconds == 600


def test_effective_database_url_prefers_test_database(monkeypatch) -> None:
    for key, value in REQUIRED.items():
        monkeypatch.setenv(key, value)
    monkeypatch.setenv("DATABASE_URL", "sqlite:///./prod.db")
    monkeypatch.setenv("TEST_DATABASE_URL", "sqlite:///./test.db")
    monkeypatch.setenv("USE_TEST_DATABASE", "true")

    assert Settings(_env_file=None).effective_database_url == "sqlite:///./test.db"
