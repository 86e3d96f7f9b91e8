# comments in English; reST docstrings
from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

import redis
from redis.exceptions import RedisError

from socialnet.services._shared.ports import (
    RefreshTokenLedger,
    RefreshTokenRecord,
    digest_token,
)

log = logging.getLogger(__name__)


def _s(value: bytes | str | None, default: str = "") -> str:
    if value is None:
        return default
    return value.decode() if isinstance(value, bytes) else value


class RedisRefreshTokenLedger(RefreshTokenLedger):
    """
    Redis-backed ledger.

    Layout::

        rt:seq            INCR counter for record ids
        rt:rec:<id>       hash {token, user_id, is_revoked, expires_at, created_at}
        rt:tok:<digest>   set of record ids carrying that digest
        rt:u:<user_id>    set of record ids owned by the user

    Keys carry no TTL: records outlive their expiry for auditing.

    :param r: A Redis client (already connected).
    :param lifetime: Refresh token lifetime applied on :meth:`save`.
    """

    SEQ_KEY = "rt:seq"

    def __init__(self, r: redis.Redis, lifetime: timedelta) -> None:
        self.r = r
        self.lifetime = lifetime

    # -------------------- helpers --------------------

    @staticmethod
    def _k(record_id: int) -> str:
        return f"rt:rec:{record_id}"

    @staticmethod
    def _kt(digest: str) -> str:
        return f"rt:tok:{digest}"

    @staticmethod
    def _ku(user_id: int) -> str:
        return f"rt:u:{user_id}"

    @staticmethod
    def _to_ts(dt: datetime) -> int:
        return int(dt.timestamp())

    @staticmethod
    def _from_ts(ts: str) -> datetime:
        return datetime.fromtimestamp(int(ts), tz=UTC)

    def _load(self, record_id: int, raw: dict) -> RefreshTokenRecord | None:
        if not raw:
            return None
        h = {_s(k): _s(v) for k, v in raw.items()}
        return RefreshTokenRecord(
            id=record_id,
            token=h["token"],
            user_id=int(h["user_id"]),
            is_revoked=h.get("is_revoked", "0") == "1",
            expires_at=self._from_ts(h["expires_at"]),
            created_at=self._from_ts(h["created_at"]),
        )

    def _ids_for(self, digest: str) -> list[int]:
        return sorted((int(_s(m)) for m in self.r.smembers(self._kt(digest))), reverse=True)

    # -------------------- API ------------------------

    def save(self, raw_token: str, user_id: int) -> RefreshTokenRecord:
        digest = digest_token(raw_token)
        now = datetime.now(UTC)
        expires_at = now + self.lifetime
        record_id = int(self.r.incr(self.SEQ_KEY))

        pipe = self.r.pipeline(transaction=True)
        pipe.hset(
            self._k(record_id),
            mapping={
                "token": digest,
                "user_id": str(user_id),
                "is_revoked": "0",
                "expires_at": str(self._to_ts(expires_at)),
                "created_at": str(self._to_ts(now)),
            },
        )
        pipe.sadd(self._kt(digest), record_id)
        pipe.sadd(self._ku(user_id), record_id)
        pipe.execute()

        return RefreshTokenRecord(
            id=record_id,
            token=digest,
            user_id=user_id,
            is_revoked=False,
            expires_at=self._from_ts(str(self._to_ts(expires_at))),
            created_at=self._from_ts(str(self._to_ts(now))),
        )

    def find_active(self, raw_token: str, user_id: int) -> RefreshTokenRecord | None:
        digest = digest_token(raw_token)
        now = datetime.now(UTC)
        for record_id in self._ids_for(digest):
            record = self._load(record_id, self.r.hgetall(self._k(record_id)))
            if record is not None and record.user_id == user_id and record.is_active(now):
                return record
        return None

    def revoke(self, record_id: int) -> bool:
        """
        Compare-and-set ``is_revoked`` 0 → 1 under WATCH/MULTI/EXEC.

        Retries when another client touches the record between the read and
        the transaction; the retry then observes the flip and returns False.
        """
        key = self._k(record_id)
        while True:
            try:
                with self.r.pipeline() as p:
                    p.watch(key)
                    state = p.hget(key, "is_revoked")
                    if state is None or _s(state) == "1":
                        p.unwatch()
                        return False
                    p.multi()
                    p.hset(key, "is_revoked", "1")
                    p.execute()
                    return True
            except redis.WatchError:
                continue

    def revoke_by_raw_token(self, raw_token: str) -> bool:
        try:
            digest = digest_token(raw_token)
            revoked = sum(1 for record_id in self._ids_for(digest) if self.revoke(record_id))
        except (RedisError, TypeError, ValueError):
            log.warning("ledger.revoke_failed", exc_info=True, extra={"reason": "redis"})
            return False
        return revoked > 0

    def get(self, record_id: int) -> RefreshTokenRecord | None:
        return self._load(record_id, self.r.hgetall(self._k(record_id)))
