from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError

from socialnet.models.refresh_token import RefreshToken
from socialnet.services._shared.ports import (
    RefreshTokenLedger,
    RefreshTokenRecord,
    digest_token,
)
from socialnet.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)


def _as_utc(dt: datetime) -> datetime:
    # SQLite drops tzinfo: label naive values as UTC (they were written as UTC)
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=UTC)


def _to_record(row: RefreshToken) -> RefreshTokenRecord:
    return RefreshTokenRecord(
        id=row.id,
        token=row.token,
        user_id=row.user_id,
        is_revoked=bool(row.is_revoked),
        expires_at=_as_utc(row.expires_at),
        created_at=_as_utc(row.created_at),
    )


class SQLRefreshTokenLedger(RefreshTokenLedger):
    """
    Ledger on the ``refresh_tokens`` table.

    Every call runs in its own Unit of Work and commits before returning, so
    ledger state is never tied to the caller's transaction.

    :param lifetime: Refresh token lifetime applied on :meth:`save`.
    :param uow_factory: Zero-arg callable returning a read-write UoW.
    """

    def __init__(
        self,
        lifetime: timedelta,
        uow_factory: Callable[[], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork,
    ) -> None:
        self.lifetime = lifetime
        self._uow_factory = uow_factory

    def save(self, raw_token: str, user_id: int) -> RefreshTokenRecord:
        digest = digest_token(raw_token)
        now = datetime.now(UTC)
        with self._uow_factory() as uow:
            row = uow.refresh_tokens.add(
                RefreshToken(
                    token=digest,
                    user_id=user_id,
                    is_revoked=False,
                    expires_at=now + self.lifetime,
                    created_at=now,
                )
            )
            return _to_record(row)

    def find_active(self, raw_token: str, user_id: int) -> RefreshTokenRecord | None:
        digest = digest_token(raw_token)
        with self._uow_factory() as uow:
            row = uow.refresh_tokens.find_active(digest, user_id, datetime.now(UTC))
            return _to_record(row) if row is not None else None

    def revoke(self, record_id: int) -> bool:
        with self._uow_factory() as uow:
            return uow.refresh_tokens.revoke_if_active(record_id)

    def revoke_by_raw_token(self, raw_token: str) -> bool:
        try:
            digest = digest_token(raw_token)
            with self._uow_factory() as uow:
                revoked = uow.refresh_tokens.revoke_all_by_digest(digest)
        except (SQLAlchemyError, TypeError, ValueError):
            log.warning("ledger.revoke_failed", exc_info=True, extra={"reason": "sql"})
            return False
        return revoked > 0

    def get(self, record_id: int) -> RefreshTokenRecord | None:
        with self._uow_factory() as uow:
            row = uow.refresh_tokens.get(record_id)
            return _to_record(row) if row is not None else None
