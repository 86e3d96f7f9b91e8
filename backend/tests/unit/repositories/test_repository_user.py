"""Unit tests for UserRepository."""

from datetime import UTC, datetime

import pytest

from socialnet.repositories.user import UserRepository
from tests.factories.user import UserFactory


class TestUserRepository:
    """Ensure ``UserRepository`` performs core persistence operations."""

    @pytest.fixture()
    def repo(self):
        return UserRepository()

    def test_get_by_email_is_case_insensitive(self, repo, session):
        """Fetch a user by email regardless of case and whitespace."""
        u = UserFactory(email="alice@example.com", username="alice")

        fetched = repo.get_by_email("  Alice@Example.com ")
        assert fetched is not None
        assert fetched.id == u.id
        assert fetched.username == "alice"

    def test_exists_by_email_and_username(self, repo, session):
        """Return existence flags for known and unknown keys."""
        UserFactory(email="bob@example.com", username="bob")

        assert repo.exists_by_email("bob@example.com")
        assert not repo.exists_by_email("nonexistent@example.com")
        assert repo.exists_by_username("bob")
        assert not repo.exists_by_username("bobby")

    def test_touch_last_active(self, repo, session):
        u = UserFactory()
        when = datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)

        repo.touch_last_active(u, when)
        session.commit()

        assert repo.get(u.id).last_active_at.replace(tzinfo=UTC) == when

    def test_assign_updates_respects_whitelist(self, repo, session):
        u = UserFactory()

        repo.assign_updates(u, {"bio": "hello"})
        assert u.bio == "hello"

        with pytest.raises(ValueError, match="non-updatable"):
            repo.assign_updates(u, {"password_hash": "x"})
