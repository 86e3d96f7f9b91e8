"""Unit tests for RefreshTokenRepository."""

from datetime import UTC, datetime, timedelta

import pytest

from socialnet.models.refresh_token import RefreshToken
from socialnet.repositories.refresh_token import RefreshTokenRepository
from tests.factories.user import UserFactory


class TestRefreshTokenRepository:
    """Ensure ``RefreshTokenRepository`` only ever flips rows it still sees active."""

    @pytest.fixture()
    def repo(self):
        return RefreshTokenRepository()

    @pytest.fixture()
    def user(self, session):
        return UserFactory()

    def _add(self, repo, session, user, digest="d" * 64, *, expires_in=timedelta(days=7)):
        row = repo.add(
            RefreshToken(
                token=digest,
                user_id=user.id,
                is_revoked=False,
                expires_at=datetime.now(UTC) + expires_in,
            )
        )
        session.commit()
        return row

    def test_find_active_filters_owner_and_expiry(self, repo, session, user):
        other = UserFactory()
        row = self._add(repo, session, user)
        self._add(repo, session, user, "e" * 64, expires_in=timedelta(seconds=-1))

        now = datetime.now(UTC)
        assert repo.find_active("d" * 64, user.id, now).id == row.id
        assert repo.find_active("d" * 64, other.id, now) is None
        assert repo.find_active("e" * 64, user.id, now) is None

    def test_revoke_if_active_flips_once(self, repo, session, user):
        row = self._add(repo, session, user)

        assert repo.revoke_if_active(row.id) is True
        assert repo.revoke_if_active(row.id) is False
        session.commit()

        session.expire_all()
        assert repo.get(row.id).is_revoked is True

    def test_revoke_all_by_digest_counts_rows(self, repo, session, user):
        self._add(repo, session, user)
        self._add(repo, session, user)
        self._add(repo, session, user, "f" * 64)

        assert repo.revoke_all_by_digest("d" * 64) == 2
        assert repo.revoke_all_by_digest("d" * 64) == 0
        assert repo.find_active("f" * 64, user.id, datetime.now(UTC)) is not None
