"""User profile endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from socialnet.api.deps import (
    current_payload,
    get_session_manager,
    get_user_service,
    json_response,
    require_auth,
    timing,
)
from socialnet.core.errors import ValidationFailed
from socialnet.schemas import UserSchema, validate_profile_update
from socialnet.services._shared.errors import NotFoundError
from socialnet.services.users.dto import ProfileUpdateIn

bp = Blueprint("users", __name__)

user_schema = UserSchema()


@bp.get("/me")
@require_auth
@timing
def get_me():
    """Return the sanitized current user."""

    user = get_session_manager().current_user(current_payload())
    return json_response(user_schema.dump(user))


@bp.get("/<ident>")
@timing
def get_user(ident: str):
    """Look a user up by numeric id, falling back to username."""

    service = get_user_service()
    if ident.isdigit():
        try:
            return json_response(user_schema.dump(service.get(int(ident))))
        except NotFoundError:
            pass  # numeric usernames are allowed
    return json_response(user_schema.dump(service.get_by_username(ident)))


@bp.patch("/<int:user_id>")
@require_auth
@timing
def update_user(user_id: int):
    """Update one's own profile; any other id answers 404."""

    result = validate_profile_update(request.get_json(silent=True))
    if not result.ok:
        raise ValidationFailed(result.error_dicts())

    user = get_user_service().update_profile(
        current_payload().user_id, user_id, ProfileUpdateIn(fields=result.data)
    )
    return json_response(user_schema.dump(user))
