"""Salted one-way hashing of client identifiers."""

from __future__ import annotations

import hashlib
import hmac


class FingerprintHasher:
    """Derive stable, non-reversible fingerprints from raw client values.

    The salt is fixed at construction so tests can pin it; the same hasher
    is used when minting and when validating a session.
    """

    def __init__(self, salt: str) -> None:
        self._salt = salt

    def hash(self, raw_value: str | None) -> str:
        """Return the hex SHA-256 digest of ``raw_value:salt``.

        A missing value hashes as the empty string, which weakens the
        fingerprint but never fails.
        """
        payload = f"{raw_value or ''}:{self._salt}".encode()
        return hashlib.sha256(payload).hexdigest()

    def matches(self, raw_value: str | None, stored_hash: str) -> bool:
        """Return True if ``raw_value`` hashes to ``stored_hash``."""
        return hmac.compare_digest(self.hash(raw_value), stored_hash)
