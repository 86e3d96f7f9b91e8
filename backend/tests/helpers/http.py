"""HTTP helper utilities for tests."""

from __future__ import annotations

from http.cookies import SimpleCookie

REFRESH_COOKIE = "refresh_token"


def json_headers(auth_token: str | None = None, refresh_token: str | None = None) -> dict[str, str]:
    """Return standard JSON headers.

    Parameters
    ----------
    auth_token:
        Optional bearer token to include.
    refresh_token:
        Optional refresh token sent as the ``refresh_token`` cookie.
    """

    headers = {"Content-Type": "application/json", "Accept": "application/json"}
    if auth_token:
        headers["Authorization"] = f"Bearer {auth_token}"
    if refresh_token:
        headers["Cookie"] = f"{REFRESH_COOKIE}={refresh_token}"
    return headers


def refresh_cookie_header(response) -> str | None:
    """Return the raw ``Set-Cookie`` header for the refresh cookie, if any."""

    for header in response.headers.getlist("Set-Cookie"):
        if header.startswith(f"{REFRESH_COOKIE}="):
            return header
    return None


def refresh_cookie_value(response) -> str | None:
    """Return the refresh token set by ``response`` (empty string when cleared)."""

    header = refresh_cookie_header(response)
    if header is None:
        return None
    cookie = SimpleCookie()
    cookie.load(header)
    return cookie[REFRESH_COOKIE].value
