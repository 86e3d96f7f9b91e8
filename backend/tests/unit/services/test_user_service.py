"""Unit tests for :class:`UserService`."""

from __future__ import annotations

from datetime import date

import pytest

from socialnet.services._shared.errors import NotFoundError
from socialnet.services.users.dto import ProfileUpdateIn
from tests.factories.user import UserFactory


def test_get_returns_public_view(user_service, session):
    user = UserFactory(username="dora")

    out = user_service.get(user.id)

    assert out.id == user.id
    assert out.username == "dora"
    assert not hasattr(out, "password_hash")


def test_get_missing_user(user_service, session):
    with pytest.raises(NotFoundError):
        user_service.get(999)


def test_get_by_username(user_service, session):
    user = UserFactory(username="dora")

    assert user_service.get_by_username("dora").id == user.id
    with pytest.raises(NotFoundError):
        user_service.get_by_username("nobody")


def test_update_profile_applies_fields(user_service, session):
    user = UserFactory()

    out = user_service.update_profile(
        user.id,
        user.id,
        ProfileUpdateIn(
            fields={"bio": "Hello", "location": "Lisbon", "birth_date": date(1990, 1, 2)}
        ),
    )

    assert out.bio == "Hello"
    assert out.location == "Lisbon"
    assert out.birth_date == date(1990, 1, 2)


def test_update_profile_of_someone_else_is_not_found(user_service, session):
    owner = UserFactory()
    intruder = UserFactory()

    with pytest.raises(NotFoundError):
        user_service.update_profile(intruder.id, owner.id, ProfileUpdateIn(fields={"bio": "x"}))

    assert user_service.get(owner.id).bio is None


def test_update_profile_rejects_protected_fields(user_service, session):
    user = UserFactory()

    with pytest.raises(ValueError):
        user_service.update_profile(user.id, user.id, ProfileUpdateIn(fields={"email": "x@y.com"}))
