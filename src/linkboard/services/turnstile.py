"""Human-verification gateway backed by Cloudflare Turnstile.

The gateway issues exactly one ``siteverify`` call per token. A negative
verdict is returned as data; only failing to reach the provider raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from linkboard.core.settings import TURNSTILE_VERIFY_URL
from linkboard.services.errors import VerificationUnavailableError

# Configure logger for this module
logger = logging.getLogger(__name__)

HTTP_INTERNAL_SERVER_ERROR = 500


@dataclass(frozen=True)
class VerificationOutcome:
    """Result of a single verification call."""

    success: bool
    error_codes: list[str] = field(default_factory=list)
    hostname: str | None = None
    challenge_ts: str | None = None


class TurnstileGateway:
    """HTTP client wrapper for the Turnstile ``siteverify`` endpoint."""

    def __init__(
        self,
        secret_key: str,
        *,
        verify_url: str = TURNSTILE_VERIFY_URL,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._secret_key = secret_key
        self._verify_url = verify_url
        self._timeout = httpx.Timeout(timeout_seconds)
        self._client = client
        self._owns_client = client is None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def verify(self, token: str, client_ip: str | None = None) -> VerificationOutcome:
        """Ask the provider whether ``token`` proves a human visitor.

        Raises:
            VerificationUnavailableError: If the provider cannot be reached or
                answers with something other than a verdict.
        """
        form: dict[str, str] = {"secret": self._secret_key, "response": token}
        if client_ip:
            form["remoteip"] = client_ip

        client = self._ensure_client()
        try:
            response = await client.post(self._verify_url, data=form)
        except httpx.HTTPError as exc:
            logger.error("Turnstile siteverify request failed: %s", exc, exc_info=True)
            raise VerificationUnavailableError() from exc

        if response.status_code >= HTTP_INTERNAL_SERVER_ERROR:
            logger.error("Turnstile siteverify responded with %d", response.status_code)
            raise VerificationUnavailableError()

        try:
            payload: Any = response.json()
        except ValueError as exc:
            logger.error("Turnstile siteverify returned a non-JSON body")
            raise VerificationUnavailableError() from exc

        if not isinstance(payload, dict):
            logger.error("Turnstile siteverify returned a JSON %s", type(payload).__name__)
            raise VerificationUnavailableError()

        outcome = VerificationOutcome(
            success=payload.get("success") is True,
            error_codes=[str(code) for code in payload.get("error-codes") or []],
            hostname=payload.get("hostname"),
            challenge_ts=payload.get("challenge_ts"),
        )
        if not outcome.success:
            logger.warning(
                "Turnstile rejected token (status %d, error codes: %s)",
                response.status_code,
                ", ".join(outcome.error_codes) or "none",
            )
        return outcome

    async def close(self) -> None:
        """Close the underlying HTTP client if this gateway created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
