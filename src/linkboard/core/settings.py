"""Application settings and configuration.

This module defines all configuration options for the Linkboard service.
Settings are loaded from environment variables with sensible defaults.
"""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CAPTCHA_SESSION_TTL = 600
TURNSTILE_VERIFY_URL = "https://challenges.cloudflare.com/turnstile/v0/siteverify"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Linkboard", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./linkboard.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Client fingerprinting
    fingerprint_salt: str = Field(alias="FINGERPRINT_SALT")
    client_ip_header: str = Field(default="CF-Connecting-IP", alias="CLIENT_IP_HEADER")
    # Proxy headers are client-controlled unless a trusted proxy overwrites them.
    trust_proxy_headers: bool = Field(default=True, alias="TRUST_PROXY_HEADERS")

    # Human verification (Cloudflare Turnstile)
    turnstile_secret_key: str = Field(alias="TURNSTILE_SECRET_KEY")
    turnstile_verify_url: str = Field(default=TURNSTILE_VERIFY_URL, alias="TURNSTILE_VERIFY_URL")
    turnstile_timeout_seconds: float = Field(default=10.0, alias="TURNSTILE_TIMEOUT_SECONDS")

    # CAPTCHA session credential
    captcha_session_ttl_seconds: int = Field(
        default=DEFAULT_CAPTCHA_SESSION_TTL,
        alias="CAPTCHA_SESSION_TTL",
    )
    captcha_cookie_name: str = Field(default="captcha_session", alias="CAPTCHA_COOKIE_NAME")
    # None means "secure only when the request arrived over https".
    cookie_secure: bool | None = Field(default=None, alias="COOKIE_SECURE")

    # Ranking
    freshness_window_days: int = Field(default=7, alias="FRESHNESS_WINDOW_DAYS")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @field_validator("captcha_session_ttl_seconds", mode="before")
    @classmethod
    def _coerce_session_ttl(cls, value: Any) -> int:
        """Fall back to the default TTL for blank, non-numeric or non-positive values."""
        try:
            ttl = int(str(value).strip())
        except (TypeError, ValueError):
            return DEFAULT_CAPTCHA_SESSION_TTL
        return ttl if ttl > 0 else DEFAULT_CAPTCHA_SESSION_TTL

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()  # type: ignore[call-arg]
