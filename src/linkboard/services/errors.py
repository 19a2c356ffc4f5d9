"""Exceptions raised by Linkboard services.

Every error carries a stable machine-readable ``reason`` code and the HTTP
status the API layer answers with. Failures are always scoped to a single
request.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


class LinkboardError(Exception):
    """Base exception for request-scoped Linkboard failures."""

    reason: str = "error"
    status_code: int = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body rendered for this error."""
        return {"error": self.reason, "detail": self.message, **self.details}


# === CAPTCHA session errors ===

class CaptchaError(LinkboardError):
    """Base class for CAPTCHA verification and session failures."""

    reason = "captcha_error"
    status_code = 403


class MissingTokenError(CaptchaError):
    """Raised when no human-verification token was supplied."""

    reason = "missing_token"

    def __init__(self) -> None:
        super().__init__("CAPTCHA token is required")


class VerificationFailedError(CaptchaError):
    """Raised when the verification provider rejects the token."""

    reason = "verification_failed"

    def __init__(self, error_codes: Sequence[str] = ()) -> None:
        self.error_codes = list(error_codes)
        super().__init__(
            "CAPTCHA validation failed",
            details={"error_codes": self.error_codes},
        )


class VerificationUnavailableError(CaptchaError):
    """Raised when the verification provider cannot be reached."""

    reason = "verification_unavailable"
    status_code = 503

    def __init__(self, message: str = "CAPTCHA verification is unavailable") -> None:
        super().__init__(message)


class SessionNotFoundError(CaptchaError):
    """Raised when the presented session id is unknown or absent."""

    reason = "session_not_found"

    def __init__(self) -> None:
        super().__init__("CAPTCHA session not found")


class SessionExpiredError(CaptchaError):
    """Raised when the presented session has passed its expiry."""

    reason = "session_expired"

    def __init__(self) -> None:
        super().__init__("CAPTCHA session has expired")


class FingerprintMismatchError(CaptchaError):
    """Raised when the request fingerprint differs from the minting client."""

    reason = "fingerprint_mismatch"

    def __init__(self) -> None:
        super().__init__("CAPTCHA session does not belong to this client")


# === Vote errors ===

class LinkNotFoundError(LinkboardError):
    """Raised when a vote targets a link that does not exist."""

    reason = "link_not_found"
    status_code = 404

    def __init__(self, link_id: int) -> None:
        super().__init__(f"Link not found: {link_id}", details={"link_id": link_id})


class AlreadyVotedError(LinkboardError):
    """Raised when a session votes twice on the same link."""

    reason = "already_voted"
    status_code = 409

    def __init__(self, link_id: int) -> None:
        super().__init__(
            "This session has already voted on the link",
            details={"link_id": link_id},
        )


class NoVoteToUndoError(LinkboardError):
    """Raised when a session undoes a vote it does not hold."""

    reason = "no_vote_to_undo"
    status_code = 409

    def __init__(self, link_id: int) -> None:
        super().__init__(
            "This session holds no matching vote on the link",
            details={"link_id": link_id},
        )
