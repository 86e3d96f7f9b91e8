"""Factory Boy definition for :class:`socialnet.models.user.User`."""

from __future__ import annotations

import factory

from socialnet.core.config import TestingConfig
from socialnet.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher
from socialnet.models.user import User
from tests.factories import BaseFactory

DEFAULT_PASSWORD = "password123"

_hasher = WerkzeugPasswordHasher(method=TestingConfig.PASSWORD_HASH_METHOD)


class UserFactory(BaseFactory):
    """Build persisted :class:`User` rows with a hashed password."""

    class Meta:
        model = User

    id = None  # let autoincrement handle it
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    username = factory.Sequence(lambda n: f"user{n}")
    display_name = factory.LazyAttribute(lambda o: o.username.capitalize())
    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    password_hash = factory.LazyFunction(lambda: "")  # set via postgen

    @factory.post_generation
    def password(obj, create, extracted, **kwargs):
        """Hash the given (or default) password onto the row."""
        obj.password_hash = _hasher.hash(extracted or DEFAULT_PASSWORD)
