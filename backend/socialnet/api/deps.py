"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar, cast

from flask import Response, current_app, g, jsonify, request

from socialnet.core.errors import Unauthorized
from socialnet.services._shared.errors import InvalidTokenError
from socialnet.services._shared.ports import TokenPayload
from socialnet.services.auth.service import SessionManager
from socialnet.services.users.service import UserService

F = TypeVar("F", bound=Callable[..., Any])


def get_session_manager() -> SessionManager:
    """Return the :class:`SessionManager` wired for the current app."""

    return cast(SessionManager, current_app.extensions["session_manager"])


def get_user_service() -> UserService:
    """Return the :class:`UserService` wired for the current app."""

    return cast(UserService, current_app.extensions["user_service"])


def bearer_token() -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""

    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def require_auth(func: F) -> F:
    """Ensure the request carries a valid access token.

    The verified payload is stored on ``g.token_payload``.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = bearer_token()
        if token is None:
            raise Unauthorized("Missing bearer token", code="missing_token")
        try:
            g.token_payload = get_session_manager().validate_access_token(token)
        except InvalidTokenError as exc:
            raise Unauthorized(str(exc), code=exc.kind.value) from exc
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_payload() -> TokenPayload:
    """Return the payload verified by :func:`require_auth`."""

    return cast(TokenPayload, g.token_payload)


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
