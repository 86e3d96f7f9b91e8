"""Refresh-token ledger rows: insert, active lookup and conditional revoke."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import select, update
from sqlalchemy.engine import CursorResult

from socialnet.models.refresh_token import RefreshToken
from socialnet.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence-only repository for :class:`RefreshToken`.

    Rows are never deleted here; revocation is a flag flip.
    """

    model = RefreshToken

    def find_active(self, digest: str, user_id: int, now: datetime) -> RefreshToken | None:
        """Return the non-revoked, unexpired row for ``digest`` owned by ``user_id``.

        :param digest: Token digest.
        :type digest: str
        :param user_id: Owner id.
        :type user_id: int
        :param now: Reference time (UTC).
        :type now: datetime
        :returns: Matching row or ``None``.
        :rtype: RefreshToken | None
        """
        stmt = (
            select(RefreshToken)
            .where(
                RefreshToken.token == digest,
                RefreshToken.user_id == user_id,
                RefreshToken.is_revoked.is_(False),
                RefreshToken.expires_at > now,
            )
            .order_by(RefreshToken.id.desc())
        )
        result = self.session.execute(stmt).scalars().first()
        return cast(RefreshToken | None, result)

    def revoke_if_active(self, record_id: int) -> bool:
        """Conditionally flip ``is_revoked`` on one row.

        Issued as a single ``UPDATE ... WHERE is_revoked = false`` so two
        concurrent callers cannot both observe the row as active.

        :param record_id: Row id.
        :type record_id: int
        :returns: ``True`` if this call performed the flip.
        :rtype: bool
        """
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.id == record_id, RefreshToken.is_revoked.is_(False))
            .values(is_revoked=True)
            .execution_options(synchronize_session=False)
        )
        result = cast(CursorResult, self.session.execute(stmt))
        return result.rowcount == 1

    def revoke_all_by_digest(self, digest: str) -> int:
        """Revoke every non-revoked row carrying ``digest``.

        :returns: Number of rows flipped.
        :rtype: int
        """
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.token == digest, RefreshToken.is_revoked.is_(False))
            .values(is_revoked=True)
            .execution_options(synchronize_session=False)
        )
        result = cast(CursorResult, self.session.execute(stmt))
        return int(result.rowcount or 0)
