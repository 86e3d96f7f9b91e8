"""User repository for persistence and credential lookups."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import select

from socialnet.models.user import User
from socialnet.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It NEVER hashes passwords or issues tokens; those live in the service
    layer behind the hasher and signer ports.
    """

    model = User

    # ---------------------------- Whitelists ----------------------------

    def _updatable_fields(self):
        """Profile fields a user may change on their own account."""
        return {
            "first_name",
            "last_name",
            "display_name",
            "bio",
            "website",
            "location",
            "birth_date",
            "profile_image",
            "cover_image",
        }

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == email.lower().strip())
        result = self.session.execute(stmt).scalars().first()
        return cast(User | None, result)

    def get_by_username(self, username: str) -> User | None:
        """Fetch a user by exact username."""
        stmt = select(User).where(User.username == username.strip())
        result = self.session.execute(stmt).scalars().first()
        return cast(User | None, result)

    def exists_by_email(self, email: str) -> bool:
        """Return ``True`` when a user with the provided email exists.

        :param email: Email address to normalise and search.
        :type email: str
        :rtype: bool
        """
        stmt = select(User.id).where(User.email == email.lower().strip())
        return bool(self.session.execute(stmt).first())

    def exists_by_username(self, username: str) -> bool:
        """Return ``True`` when the username is taken."""
        stmt = select(User.id).where(User.username == username.strip())
        return bool(self.session.execute(stmt).first())

    # ---------------------------- Mutations ----------------------------

    def touch_last_active(self, user: User, when: datetime) -> None:
        """Stamp ``last_active_at`` and flush."""
        user.last_active_at = when
        self.flush()
