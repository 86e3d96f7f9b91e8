"""Unit tests for :class:`SessionManager`.

Users live in the test database; the ledger is swapped between the
in-memory and SQL backends to check both honour the same lifecycle.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

import pytest
from freezegun import freeze_time

from socialnet.infra.sqlalchemy.sql_refresh_ledger import SQLRefreshTokenLedger
from socialnet.models.user import User
from socialnet.services._shared.errors import (
    DuplicateEmailError,
    DuplicateUsernameError,
    InvalidCredentialsError,
    InvalidTokenError,
)
from socialnet.services._shared.ports import InMemoryRefreshTokenLedger
from socialnet.services.auth.dto import LoginIn, RegisterIn
from socialnet.services.auth.service import SessionManager
from tests.conftest import REFRESH_LIFETIME
from tests.factories.user import DEFAULT_PASSWORD, UserFactory


@pytest.fixture(params=["memory", "sql"])
def ledger(request, app):
    if request.param == "memory":
        return InMemoryRefreshTokenLedger(REFRESH_LIFETIME)
    return SQLRefreshTokenLedger(REFRESH_LIFETIME)


@pytest.fixture()
def manager(session, hasher, signer, ledger):
    return SessionManager(hasher=hasher, signer=signer, ledger=ledger)


def _register_alice(manager):
    return manager.register(
        RegisterIn(username="alice", email="alice@x.com", password="password123")
    )


# --------------------------------------------------------------------------- #
# register
# --------------------------------------------------------------------------- #


def test_register_creates_user_and_first_session(manager, ledger, signer, session):
    out = _register_alice(manager)

    assert out.user.username == "alice"
    assert out.user.email == "alice@x.com"
    assert out.user.display_name == "alice"
    assert not hasattr(out.user, "password_hash")

    stored = session.get(User, out.user.id)
    assert stored.password_hash != "password123"

    access = signer.verify_access(out.access_token)
    assert access.user_id == out.user.id
    assert ledger.find_active(out.refresh_token, out.user.id) is not None


def test_register_keeps_explicit_display_name(manager):
    out = manager.register(
        RegisterIn(
            username="bob",
            email="bob@x.com",
            password="password123",
            first_name="Bob",
            display_name="Bobby",
        )
    )
    assert out.user.display_name == "Bobby"
    assert out.user.first_name == "Bob"


def test_register_duplicate_email_is_checked_first(manager):
    _register_alice(manager)

    # Both email and username collide: email wins
    with pytest.raises(DuplicateEmailError):
        manager.register(RegisterIn(username="alice", email="alice@x.com", password="password123"))


def test_register_duplicate_username(manager):
    _register_alice(manager)

    with pytest.raises(DuplicateUsernameError):
        manager.register(RegisterIn(username="alice", email="other@x.com", password="password123"))


def test_register_duplicate_email_is_case_insensitive(manager):
    _register_alice(manager)

    with pytest.raises(DuplicateEmailError):
        manager.register(RegisterIn(username="alice2", email="ALICE@x.com", password="password123"))


# --------------------------------------------------------------------------- #
# login
# --------------------------------------------------------------------------- #


def test_login_returns_session_and_touches_last_active(manager, ledger, session):
    user = UserFactory(email="carol@x.com")
    assert user.last_active_at is None

    with freeze_time("2026-05-01 08:30:00"):
        out = manager.login(LoginIn(email="carol@x.com", password=DEFAULT_PASSWORD))
        assert ledger.find_active(out.refresh_token, user.id) is not None

    assert out.user.id == user.id
    assert out.user.last_active_at == datetime(2026, 5, 1, 8, 30, tzinfo=UTC)


def test_login_failures_are_indistinguishable(manager, caplog):
    UserFactory(email="carol@x.com")

    with pytest.raises(InvalidCredentialsError) as unknown:
        manager.login(LoginIn(email="nobody@x.com", password=DEFAULT_PASSWORD))
    with pytest.raises(InvalidCredentialsError) as wrong:
        manager.login(LoginIn(email="carol@x.com", password="wrongpass"))

    assert str(unknown.value) == str(wrong.value)
    assert unknown.value.kind is wrong.value.kind


def test_login_inactive_user_is_rejected(manager):
    UserFactory(email="gone@x.com", is_active=False)

    with pytest.raises(InvalidCredentialsError):
        manager.login(LoginIn(email="gone@x.com", password=DEFAULT_PASSWORD))


def test_login_opens_independent_sessions(manager, ledger):
    user = UserFactory(email="carol@x.com")
    first = manager.login(LoginIn(email="carol@x.com", password=DEFAULT_PASSWORD))
    second = manager.login(LoginIn(email="carol@x.com", password=DEFAULT_PASSWORD))

    assert first.refresh_token != second.refresh_token
    assert ledger.find_active(first.refresh_token, user.id) is not None
    assert ledger.find_active(second.refresh_token, user.id) is not None


# --------------------------------------------------------------------------- #
# refresh
# --------------------------------------------------------------------------- #


def test_refresh_rotates_and_rejects_replay(manager, signer):
    session0 = _register_alice(manager)
    t0 = session0.refresh_token

    rotated = manager.refresh(t0)
    t1 = rotated.refresh_token
    assert t1 != t0
    assert signer.verify_access(rotated.access_token).user_id == session0.user.id

    with pytest.raises(InvalidTokenError):
        manager.refresh(t0)

    assert manager.refresh(t1).refresh_token != t1


def test_refresh_rejects_access_token(manager):
    out = _register_alice(manager)

    with pytest.raises(InvalidTokenError):
        manager.refresh(out.access_token)


def test_refresh_rejects_garbage(manager):
    with pytest.raises(InvalidTokenError):
        manager.refresh("not-a-token")


def test_refresh_rejects_unrecorded_token(manager, signer):
    user = UserFactory()
    pair = signer.issue_pair(user.id)

    with pytest.raises(InvalidTokenError):
        manager.refresh(pair.refresh_token)


def test_refresh_rejects_expired_token(manager):
    with freeze_time("2026-05-01 08:00:00") as frozen:
        out = _register_alice(manager)
        frozen.tick(REFRESH_LIFETIME + timedelta(seconds=1))
        with pytest.raises(InvalidTokenError):
            manager.refresh(out.refresh_token)


def test_refresh_loses_race_when_revoke_reports_false(manager, ledger, monkeypatch):
    out = _register_alice(manager)
    monkeypatch.setattr(ledger, "revoke", lambda record_id: False)

    with pytest.raises(InvalidTokenError):
        manager.refresh(out.refresh_token)


def test_refresh_rejects_deactivated_account(manager, ledger, session, caplog):
    out = _register_alice(manager)

    user = session.get(User, out.user.id)
    user.is_active = False
    session.commit()

    with caplog.at_level(logging.INFO, logger="socialnet.services.auth.service"):
        with pytest.raises(InvalidTokenError):
            manager.refresh(out.refresh_token)

    assert "auth.refresh.rejected" in caplog.text
    # Rejected before consumption, so no replacement session was opened.
    assert ledger.find_active(out.refresh_token, out.user.id) is not None


def test_refresh_rejects_deleted_account(manager, session):
    out = _register_alice(manager)

    session.delete(session.get(User, out.user.id))
    session.commit()

    with pytest.raises(InvalidTokenError):
        manager.refresh(out.refresh_token)


def test_outstanding_access_token_survives_rotation(manager):
    out = _register_alice(manager)
    manager.refresh(out.refresh_token)

    assert manager.validate_access_token(out.access_token).user_id == out.user.id


# --------------------------------------------------------------------------- #
# logout
# --------------------------------------------------------------------------- #


def test_logout_revokes_refresh_token(manager, ledger):
    out = _register_alice(manager)

    manager.logout(out.user.id, out.refresh_token)

    assert ledger.find_active(out.refresh_token, out.user.id) is None
    with pytest.raises(InvalidTokenError):
        manager.refresh(out.refresh_token)


def test_logout_without_token_is_a_noop(manager, ledger):
    out = _register_alice(manager)

    manager.logout(out.user.id, None)
    manager.logout(out.user.id, "")

    assert ledger.find_active(out.refresh_token, out.user.id) is not None


def test_logout_ignores_non_encodable_token(manager, ledger):
    out = _register_alice(manager)

    manager.logout(out.user.id, "\ud800")

    assert ledger.find_active(out.refresh_token, out.user.id) is not None


def test_logout_never_raises_on_ledger_failure(manager, ledger, monkeypatch, caplog):
    out = _register_alice(manager)
    monkeypatch.setattr(ledger, "revoke_by_raw_token", lambda raw: False)

    with caplog.at_level(logging.INFO, logger="socialnet.services.auth.service"):
        manager.logout(out.user.id, out.refresh_token)
    assert "auth.logout" in caplog.text


# --------------------------------------------------------------------------- #
# access tokens
# --------------------------------------------------------------------------- #


def test_current_user_resolves_payload(manager):
    out = _register_alice(manager)
    payload = manager.validate_access_token(out.access_token)

    assert manager.current_user(payload).id == out.user.id


def test_current_user_rejects_deactivated_account(manager, session):
    out = _register_alice(manager)
    payload = manager.validate_access_token(out.access_token)

    user = session.get(User, out.user.id)
    user.is_active = False
    session.commit()

    with pytest.raises(InvalidTokenError):
        manager.current_user(payload)


def test_validate_access_token_rejects_refresh_token(manager):
    out = _register_alice(manager)

    with pytest.raises(InvalidTokenError):
        manager.validate_access_token(out.refresh_token)
