"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import AuthSessionSchema, LoginSchema, RegisterSchema, TokenResponseSchema
from .user import ProfileUpdateSchema, UserSchema
from .validation import (
    FieldError,
    ValidationResult,
    validate_login,
    validate_profile_update,
    validate_registration,
)

__all__ = [
    "AuthSessionSchema",
    "LoginSchema",
    "RegisterSchema",
    "TokenResponseSchema",
    "ProfileUpdateSchema",
    "UserSchema",
    "FieldError",
    "ValidationResult",
    "validate_login",
    "validate_profile_update",
    "validate_registration",
]
