# socialnet/services/users/dto.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Any

from socialnet.models.user import User

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class ProfileUpdateIn:
    """
    Partial profile update.

    Only the keys present in ``fields`` are applied; the repository whitelist
    decides which of them are assignable.

    :param fields: Public field name → new value.
    :type fields: dict[str, Any]
    """

    fields: dict[str, Any] = field(default_factory=dict)


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Sanitized user. Has no ``password_hash`` attribute at all.

    :param id: User id.
    :param email: Normalized email.
    :param username: Public handle.
    """

    id: int
    email: str
    username: str
    first_name: str | None
    last_name: str | None
    display_name: str | None
    profile_image: str | None
    cover_image: str | None
    bio: str | None
    website: str | None
    location: str | None
    birth_date: date | None
    is_verified: bool
    is_private: bool
    is_active: bool
    last_active_at: datetime | None
    created_at: datetime | None
    updated_at: datetime | None


def _utc(dt: datetime | None) -> datetime | None:
    if dt is None:
        return None
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=UTC)


def to_user_public(user: User) -> UserPublicOut:
    """Strip the credential columns from a :class:`User` row."""
    return UserPublicOut(
        id=user.id,
        email=user.email,
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
        display_name=user.display_name,
        profile_image=user.profile_image,
        cover_image=user.cover_image,
        bio=user.bio,
        website=user.website,
        location=user.location,
        birth_date=user.birth_date,
        is_verified=bool(user.is_verified),
        is_private=bool(user.is_private),
        is_active=bool(user.is_active),
        last_active_at=_utc(user.last_active_at),
        created_at=_utc(user.created_at),
        updated_at=_utc(user.updated_at),
    )
