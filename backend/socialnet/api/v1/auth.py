"""Authentication endpoints: register, login, logout, refresh, me."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from socialnet.api.cookies import clear_refresh_cookie, read_refresh_cookie, set_refresh_cookie
from socialnet.api.deps import (
    current_payload,
    get_session_manager,
    json_response,
    require_auth,
    timing,
)
from socialnet.core.errors import Unauthorized, ValidationFailed
from socialnet.core.extensions import limiter
from socialnet.schemas import (
    AuthSessionSchema,
    TokenResponseSchema,
    UserSchema,
    validate_login,
    validate_registration,
)
from socialnet.services._shared.errors import InvalidTokenError
from socialnet.services.auth.dto import LoginIn, RegisterIn

bp = Blueprint("auth", __name__)

session_schema = AuthSessionSchema()
token_schema = TokenResponseSchema()
user_schema = UserSchema()


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "5 per minute"))


@bp.post("/register")
@timing
def register():
    """Create an account, set the refresh cookie and return user + access token."""

    result = validate_registration(request.get_json(silent=True))
    if not result.ok:
        raise ValidationFailed(result.error_dicts())

    out = get_session_manager().register(RegisterIn(**result.data))
    response = json_response(session_schema.dump(out), status=201)
    return set_refresh_cookie(response, out.refresh_token)


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Authenticate credentials, set the refresh cookie and return user + access token."""

    result = validate_login(request.get_json(silent=True))
    if not result.ok:
        raise ValidationFailed(result.error_dicts())

    out = get_session_manager().login(LoginIn(**result.data))
    response = json_response(session_schema.dump(out))
    return set_refresh_cookie(response, out.refresh_token)


@bp.post("/logout")
@require_auth
@timing
def logout():
    """Revoke the presented refresh token (best effort) and clear the cookie.

    The cookie is path-scoped to the refresh endpoint, so clients that do not
    send it here may pass the token as ``refresh_token`` in the JSON body.
    """

    raw = read_refresh_cookie()
    if raw is None:
        body = request.get_json(silent=True)
        candidate = body.get("refresh_token") if isinstance(body, dict) else None
        raw = candidate if isinstance(candidate, str) and candidate else None

    get_session_manager().logout(current_payload().user_id, raw)
    return clear_refresh_cookie(json_response({"success": True}))


@bp.post("/refresh")
@timing
def refresh():
    """Rotate the refresh cookie and return a new access token."""

    raw = read_refresh_cookie()
    if raw is None:
        return Unauthorized("Refresh token not found", code="missing_refresh_token").to_response()

    try:
        pair = get_session_manager().refresh(raw)
    except InvalidTokenError as exc:
        response = Unauthorized("Invalid refresh token", code=exc.kind.value).to_response()
        return clear_refresh_cookie(response)

    response = json_response(token_schema.dump(pair))
    return set_refresh_cookie(response, pair.refresh_token)


@bp.get("/me")
@require_auth
@timing
def me():
    """Return the sanitized current user."""

    user = get_session_manager().current_user(current_payload())
    return json_response(user_schema.dump(user))
