"""Refresh-token cookie contract shared by the auth endpoints."""

from __future__ import annotations

from flask import Response, current_app, request

from socialnet.services._shared.durations import parse_duration


def _cookie_name() -> str:
    return str(current_app.config.get("REFRESH_COOKIE_NAME", "refresh_token"))


def _cookie_path() -> str:
    return str(current_app.config.get("REFRESH_COOKIE_PATH", "/api/v1/auth/refresh"))


def read_refresh_cookie() -> str | None:
    """Return the refresh token sent as a cookie, if any."""
    return request.cookies.get(_cookie_name()) or None


def set_refresh_cookie(response: Response, token: str) -> Response:
    """
    Attach the refresh token as an HttpOnly, SameSite=Strict cookie.

    The cookie is scoped to the refresh endpoint and lives as long as the
    refresh token itself.
    """
    max_age = int(parse_duration(current_app.config["JWT_REFRESH_EXPIRATION"]).total_seconds())
    response.set_cookie(
        _cookie_name(),
        token,
        max_age=max_age,
        path=_cookie_path(),
        secure=bool(current_app.config.get("REFRESH_COOKIE_SECURE", False)),
        httponly=True,
        samesite="Strict",
    )
    return response


def clear_refresh_cookie(response: Response) -> Response:
    """Expire the refresh cookie on the client."""
    response.delete_cookie(
        _cookie_name(),
        path=_cookie_path(),
        secure=bool(current_app.config.get("REFRESH_COOKIE_SECURE", False)),
        httponly=True,
        samesite="Strict",
    )
    return response
