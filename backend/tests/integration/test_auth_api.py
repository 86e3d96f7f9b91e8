"""Integration tests for the authentication endpoints."""

from __future__ import annotations

from tests.helpers.assertions import assert_json_keys, assert_problem
from tests.helpers.http import json_headers, refresh_cookie_header, refresh_cookie_value

BASE = "/api/v1/auth"
ALICE = {"username": "alice", "email": "alice@x.com", "password": "password123"}


def _register(client, payload=None):
    return client.post(f"{BASE}/register", json=payload or ALICE, headers=json_headers())


def _login(client, email="alice@x.com", password="password123"):
    return client.post(
        f"{BASE}/login", json={"email": email, "password": password}, headers=json_headers()
    )


# --------------------------------------------------------------------------- #
# register
# --------------------------------------------------------------------------- #


def test_register_returns_user_access_token_and_cookie(client) -> None:
    resp = _register(client)

    assert resp.status_code == 201
    body = resp.get_json()
    assert_json_keys(body, {"user", "access_token"})
    assert "refresh_token" not in body
    assert body["user"]["username"] == "alice"
    assert body["user"]["display_name"] == "alice"
    assert "password" not in body["user"]
    assert "password_hash" not in body["user"]

    cookie = refresh_cookie_header(resp)
    assert cookie is not None
    assert refresh_cookie_value(resp)
    assert "HttpOnly" in cookie
    assert "SameSite=Strict" in cookie
    assert "Path=/api/v1/auth/refresh" in cookie
    assert "Max-Age=604800" in cookie


def test_register_duplicate_email(client) -> None:
    _register(client)

    resp = _register(client, {**ALICE, "username": "alice2"})
    assert_problem(resp, 409, "duplicate_email")


def test_register_duplicate_username(client) -> None:
    _register(client)

    resp = _register(client, {**ALICE, "email": "other@x.com"})
    assert_problem(resp, 409, "duplicate_username")


def test_register_validation_errors(client) -> None:
    resp = _register(client, {"username": "a", "email": "nope", "password": "short"})

    body = assert_problem(resp, 422, "validation_error")
    fields = {e["field"] for e in body["details"]["errors"]}
    assert fields == {"email", "password", "username"}


def test_register_rejects_non_json_body(client) -> None:
    resp = client.post(f"{BASE}/register", data="not json", headers={"Content-Type": "text/plain"})
    assert_problem(resp, 422, "validation_error")


# --------------------------------------------------------------------------- #
# login
# --------------------------------------------------------------------------- #


def test_login_returns_session(client) -> None:
    _register(client)

    resp = _login(client)

    assert resp.status_code == 200
    body = resp.get_json()
    assert_json_keys(body, {"user", "access_token"})
    assert body["user"]["last_active_at"] is not None
    assert refresh_cookie_value(resp)


def test_login_failures_look_the_same(client) -> None:
    _register(client)

    wrong = assert_problem(_login(client, password="wrongpass"), 401, "invalid_credentials")
    unknown = assert_problem(_login(client, email="ghost@x.com"), 401, "invalid_credentials")

    assert wrong["detail"] == unknown["detail"]
    assert refresh_cookie_header(_login(client, password="wrongpass")) is None


# --------------------------------------------------------------------------- #
# refresh
# --------------------------------------------------------------------------- #


def test_refresh_without_cookie(client) -> None:
    resp = client.post(f"{BASE}/refresh", headers=json_headers())
    assert_problem(resp, 401, "missing_refresh_token")


def test_refresh_rotates_cookie_and_rejects_replay(client) -> None:
    t0 = refresh_cookie_value(_register(client))

    resp = client.post(f"{BASE}/refresh", headers=json_headers(refresh_token=t0))
    assert resp.status_code == 200
    assert_json_keys(resp.get_json(), {"access_token"})
    t1 = refresh_cookie_value(resp)
    assert t1 and t1 != t0

    replay = client.post(f"{BASE}/refresh", headers=json_headers(refresh_token=t0))
    assert_problem(replay, 401, "invalid_token")
    cleared = refresh_cookie_header(replay)
    assert cleared is not None
    assert "Max-Age=0" in cleared
    assert refresh_cookie_value(replay) == ""

    again = client.post(f"{BASE}/refresh", headers=json_headers(refresh_token=t1))
    assert again.status_code == 200


def test_refreshed_access_token_works(client) -> None:
    t0 = refresh_cookie_value(_register(client))
    access = client.post(f"{BASE}/refresh", headers=json_headers(refresh_token=t0)).get_json()[
        "access_token"
    ]

    resp = client.get(f"{BASE}/me", headers=json_headers(auth_token=access))
    assert resp.status_code == 200
    assert resp.get_json()["username"] == "alice"


def test_refresh_with_garbage_cookie(client) -> None:
    resp = client.post(f"{BASE}/refresh", headers=json_headers(refresh_token="garbage"))
    assert_problem(resp, 401, "invalid_token")


# --------------------------------------------------------------------------- #
# logout
# --------------------------------------------------------------------------- #


def test_logout_with_cookie_revokes_session(client) -> None:
    reg = _register(client)
    access = reg.get_json()["access_token"]
    refresh = refresh_cookie_value(reg)

    resp = client.post(
        f"{BASE}/logout", headers=json_headers(auth_token=access, refresh_token=refresh)
    )
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True}
    assert "Max-Age=0" in refresh_cookie_header(resp)

    after = client.post(f"{BASE}/refresh", headers=json_headers(refresh_token=refresh))
    assert_problem(after, 401, "invalid_token")


def test_logout_with_body_token(client) -> None:
    reg = _register(client)
    access = reg.get_json()["access_token"]
    refresh = refresh_cookie_value(reg)

    resp = client.post(
        f"{BASE}/logout", json={"refresh_token": refresh}, headers=json_headers(auth_token=access)
    )
    assert resp.status_code == 200

    after = client.post(f"{BASE}/refresh", headers=json_headers(refresh_token=refresh))
    assert after.status_code == 401


def test_logout_without_refresh_token_still_succeeds(client) -> None:
    access = _register(client).get_json()["access_token"]

    resp = client.post(f"{BASE}/logout", headers=json_headers(auth_token=access))
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True}


def test_logout_requires_access_token(client) -> None:
    resp = client.post(f"{BASE}/logout", headers=json_headers())
    assert_problem(resp, 401, "missing_token")


# --------------------------------------------------------------------------- #
# me
# --------------------------------------------------------------------------- #


def test_me_returns_current_user(client) -> None:
    reg = _register(client).get_json()

    resp = client.get(f"{BASE}/me", headers=json_headers(auth_token=reg["access_token"]))
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["id"] == reg["user"]["id"]
    assert data["email"] == "alice@x.com"


def test_me_requires_auth(client) -> None:
    assert_problem(client.get(f"{BASE}/me"), 401, "missing_token")


def test_me_rejects_refresh_token_as_bearer(client) -> None:
    refresh = refresh_cookie_value(_register(client))

    resp = client.get(f"{BASE}/me", headers=json_headers(auth_token=refresh))
    assert_problem(resp, 401, "invalid_token")


def test_logout_with_non_encodable_body_token_succeeds(client) -> None:
    access = _register(client).get_json()["access_token"]

    resp = client.post(
        f"{BASE}/logout", json={"refresh_token": "\ud800"}, headers=json_headers(auth_token=access)
    )
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True}
