from __future__ import annotations

import hashlib
import threading
from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta
from typing import Protocol


def digest_token(raw_token: str) -> str:
    """
    Deterministic lookup key of a raw refresh token.

    Unsalted on purpose: the same input must map to the same key across calls.
    Signed tokens already carry enough entropy for a plain SHA-256.

    :param raw_token: Signed refresh token as handed to the client.
    :returns: 64-char hex digest.
    :raises TypeError: If ``raw_token`` is not a string.
    """
    if not isinstance(raw_token, str):
        raise TypeError(f"Refresh token must be str, got {type(raw_token).__name__}")
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


@dataclass(frozen=True, slots=True)
class RefreshTokenRecord:
    """
    Read-model of one ledger entry.

    :ivar id: Record identifier.
    :ivar token: Digest of the raw token (see :func:`digest_token`).
    :ivar user_id: Owner user id.
    :ivar is_revoked: Whether the token was consumed or logged out.
    :ivar expires_at: Absolute expiration (UTC).
    :ivar created_at: Insertion time (UTC).
    """

    id: int
    token: str
    user_id: int
    is_revoked: bool
    expires_at: datetime
    created_at: datetime

    def is_active(self, now: datetime | None = None) -> bool:
        """True iff not revoked and not yet expired."""
        now = now or datetime.now(UTC)
        return not self.is_revoked and self.expires_at > now


class RefreshTokenLedger(Protocol):
    """
    Persistent record of every issued refresh token.

    The ledger, not the token signature, decides whether a refresh token is
    still usable. ``revoke`` MUST be an atomic compare-and-set.
    """

    def save(self, raw_token: str, user_id: int) -> RefreshTokenRecord:
        """Insert a non-revoked record expiring one refresh lifetime from now."""
        ...

    def find_active(self, raw_token: str, user_id: int) -> RefreshTokenRecord | None:
        """Return the usable record for ``raw_token`` owned by ``user_id``, if any."""
        ...

    def revoke(self, record_id: int) -> bool:
        """
        Flip ``is_revoked`` from False to True on exactly that record.

        :returns: True only for the caller that performed the flip.
        """
        ...

    def revoke_by_raw_token(self, raw_token: str) -> bool:
        """
        Revoke every non-revoked record matching ``raw_token``.

        Never raises: hashing or store failures are logged and reported as False.

        :returns: True if at least one record was revoked.
        """
        ...

    def get(self, record_id: int) -> RefreshTokenRecord | None:
        """Fetch a record snapshot, revoked or not."""
        ...


class InMemoryRefreshTokenLedger(RefreshTokenLedger):
    """
    Process-local ledger used by unit tests and the ``memory`` backend.

    .. note::
       A threading lock provides the atomic compare-and-set on revoke.
    """

    def __init__(self, lifetime: timedelta) -> None:
        self.lifetime = lifetime
        self._records: dict[int, RefreshTokenRecord] = {}
        self._seq = 0
        self._lock = threading.Lock()

    def save(self, raw_token: str, user_id: int) -> RefreshTokenRecord:
        digest = digest_token(raw_token)
        now = datetime.now(UTC)
        with self._lock:
            self._seq += 1
            record = RefreshTokenRecord(
                id=self._seq,
                token=digest,
                user_id=user_id,
                is_revoked=False,
                expires_at=now + self.lifetime,
                created_at=now,
            )
            self._records[record.id] = record
            return record

    def find_active(self, raw_token: str, user_id: int) -> RefreshTokenRecord | None:
        digest = digest_token(raw_token)
        now = datetime.now(UTC)
        with self._lock:
            for record in self._records.values():
                if record.token == digest and record.user_id == user_id and record.is_active(now):
                    return record
        return None

    def revoke(self, record_id: int) -> bool:
        with self._lock:
            record = self._records.get(record_id)
            if record is None or record.is_revoked:
                return False
            self._records[record_id] = replace(record, is_revoked=True)
            return True

    def revoke_by_raw_token(self, raw_token: str) -> bool:
        try:
            digest = digest_token(raw_token)
        except (TypeError, ValueError):
            return False
        revoked = 0
        with self._lock:
            for record_id, record in list(self._records.items()):
                if record.token == digest and not record.is_revoked:
                    self._records[record_id] = replace(record, is_revoked=True)
                    revoked += 1
        return revoked > 0

    def get(self, record_id: int) -> RefreshTokenRecord | None:
        return self._records.get(record_id)

