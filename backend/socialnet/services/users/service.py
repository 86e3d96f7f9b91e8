# socialnet/services/users/service.py
from __future__ import annotations

import logging

from socialnet.services._shared.base import BaseService
from socialnet.services._shared.errors import NotFoundError
from socialnet.services.users.dto import ProfileUpdateIn, UserPublicOut, to_user_public

log = logging.getLogger(__name__)


class UserService(BaseService):
    """
    Read and self-service operations on user profiles.

    Every user leaving this service is a :class:`UserPublicOut`.
    """

    def get(self, user_id: int) -> UserPublicOut:
        """
        Fetch a sanitized user by id.

        :raises NotFoundError: If no such user exists.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return to_user_public(user)

    def get_by_username(self, username: str) -> UserPublicOut:
        """
        Fetch a sanitized user by username.

        :raises NotFoundError: If no such user exists.
        """
        with self.ro_uow() as uow:
            user = uow.users.get_by_username(username)
            if user is None:
                raise NotFoundError("User", username)
            return to_user_public(user)

    def update_profile(
        self, actor_id: int, user_id: int, dto: ProfileUpdateIn
    ) -> UserPublicOut:
        """
        Apply a partial profile update to the actor's own account.

        :param actor_id: Authenticated user.
        :param user_id: Target account.
        :param dto: Fields to change.
        :returns: Updated sanitized user.
        :raises NotFoundError: If the target is missing or not the actor.
        :raises ValueError: If a non-updatable field is supplied.
        """
        self.ensure_owner(actor_id, user_id)
        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            uow.users.assign_updates(user, dto.fields)
            out = to_user_public(user)
        log.info("users.profile_updated", extra={"user_id": user_id})
        return out
