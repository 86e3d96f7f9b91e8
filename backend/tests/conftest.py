"""Pytest fixtures building an isolated app on in-memory SQLite.

Each test gets a fresh application and schema; ``drop_all`` on teardown
guarantees nothing leaks between cases.
"""

from __future__ import annotations

import os
from datetime import timedelta

import fakeredis
import pytest

from socialnet.core.config import TestingConfig
from socialnet.core.extensions import db as _db
from socialnet.factory import create_app
from socialnet.infra.jwt.pyjwt_token_signer import JWTTokenSigner
from socialnet.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher
from socialnet.services._shared.ports import InMemoryRefreshTokenLedger

ACCESS_SECRET = TestingConfig.JWT_ACCESS_SECRET
REFRESH_SECRET = TestingConfig.JWT_REFRESH_SECRET
REFRESH_LIFETIME = timedelta(days=7)


@pytest.fixture()
def app():
    """Create a Flask application configured for testing.

    Yields
    ------
    flask.Flask
        Application with :class:`TestingConfig`, tables created, and an
        application context pushed for the duration of the test.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestingConfig)
    app.logger.setLevel("WARNING")
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def client(app):
    """Test client without a cookie jar; tests send ``Cookie`` headers explicitly."""
    return app.test_client(use_cookies=False)


@pytest.fixture()
def session(app):
    """Return the Flask-scoped session and wire Factory Boy to it."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(_db.session)
    yield _db.session
    SQLAlchemySession.set(None)


@pytest.fixture()
def session_manager(app):
    """The :class:`SessionManager` wired by the app factory (SQL ledger)."""
    return app.extensions["session_manager"]


@pytest.fixture()
def user_service(app):
    return app.extensions["user_service"]


@pytest.fixture(scope="session")
def hasher():
    """Cheap hasher so tests stay fast."""
    return WerkzeugPasswordHasher(method=TestingConfig.PASSWORD_HASH_METHOD)


@pytest.fixture()
def signer():
    return JWTTokenSigner(
        access_secret=ACCESS_SECRET,
        refresh_secret=REFRESH_SECRET,
        access_lifetime=timedelta(minutes=15),
        refresh_lifetime=REFRESH_LIFETIME,
    )


@pytest.fixture()
def memory_ledger():
    return InMemoryRefreshTokenLedger(REFRESH_LIFETIME)


@pytest.fixture()
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk
