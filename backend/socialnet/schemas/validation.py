"""
Explicit request validation for the auth and users endpoints.

Each ``validate_*`` function loads a JSON payload through its schema and
returns a :class:`ValidationResult` instead of raising, so views decide how
to answer. The service layer assumes its inputs already passed here.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from marshmallow import Schema, ValidationError

from .auth import LoginSchema, RegisterSchema
from .user import ProfileUpdateSchema


@dataclass(frozen=True, slots=True)
class FieldError:
    """One failed rule on one field (``_schema`` for payload-level problems)."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """
    Outcome of validating a payload.

    :ivar ok: True when ``errors`` is empty.
    :ivar data: Deserialized payload (empty on failure).
    :ivar errors: Field errors, sorted by field name.
    """

    ok: bool
    data: dict[str, Any] = field(default_factory=dict)
    errors: list[FieldError] = field(default_factory=list)

    def error_dicts(self) -> list[dict[str, str]]:
        return [e.to_dict() for e in self.errors]


def _flatten(messages: Any, prefix: str = "") -> list[FieldError]:
    """Turn marshmallow's nested ``messages`` into a flat error list."""
    if isinstance(messages, Mapping):
        out: list[FieldError] = []
        for key in sorted(messages, key=str):
            name = f"{prefix}.{key}" if prefix else str(key)
            out.extend(_flatten(messages[key], name))
        return out
    if isinstance(messages, list | tuple):
        out = []
        for msg in messages:
            out.extend(_flatten(msg, prefix))
        return out
    return [FieldError(field=prefix or "_schema", message=str(messages))]


def _run(schema: Schema, payload: Any) -> ValidationResult:
    if not isinstance(payload, Mapping):
        return ValidationResult(
            ok=False, errors=[FieldError("_schema", "Request body must be a JSON object.")]
        )
    try:
        data = schema.load(payload)
    except ValidationError as err:
        return ValidationResult(ok=False, errors=_flatten(err.messages))
    return ValidationResult(ok=True, data=dict(data))


def validate_registration(payload: Any) -> ValidationResult:
    """Validate a registration body (username, email, password, optional names)."""
    return _run(RegisterSchema(), payload)


def validate_login(payload: Any) -> ValidationResult:
    """Validate a login body (email, password)."""
    return _run(LoginSchema(), payload)


def validate_profile_update(payload: Any) -> ValidationResult:
    """Validate a partial profile update; unknown or protected keys fail."""
    return _run(ProfileUpdateSchema(), payload)
