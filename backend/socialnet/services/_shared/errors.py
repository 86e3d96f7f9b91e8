"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask or HTTP
concerns. Callers branch on the exception type (or ``kind``), never on the
message text.

The translation to HTTP responses (RFC 7807) is handled by
``socialnet/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, *markers: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name (``uq_users_email``) while SQLite
    reports the column (``users.email``), so callers pass both.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    *markers : str
        Constraint names or ``table.column`` hints to look for.

    Returns
    -------
    bool
        True if the error message mentions any of the markers.
    """
    message = str(exc.orig).lower() if exc.orig else str(exc).lower()
    return any(marker.lower() in message for marker in markers)


class AuthErrorKind(str, Enum):
    """Stable identifiers of the expected authentication failures."""

    DUPLICATE_EMAIL = "duplicate_email"
    DUPLICATE_USERNAME = "duplicate_username"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_TOKEN = "invalid_token"


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer translates them to ``APIError`` subclasses.
    """

    pass


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


# --------------------------------------------------------------------------- #
# Authentication errors
# --------------------------------------------------------------------------- #


class DuplicateEmailError(ConflictError):
    """Registration attempted with an email that already has an account."""

    kind = AuthErrorKind.DUPLICATE_EMAIL

    def __init__(self) -> None:
        super().__init__("User", "Email already in use")


class DuplicateUsernameError(ConflictError):
    """Registration attempted with a taken username."""

    kind = AuthErrorKind.DUPLICATE_USERNAME

    def __init__(self) -> None:
        super().__init__("User", "Username already in use")


class AuthenticationError(ServiceError):
    """Base for failures that must surface as *unauthorized*."""

    kind: AuthErrorKind
    default_message = "Unauthorized"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class InvalidCredentialsError(AuthenticationError):
    """
    Login failed.

    Raised with the same message whether the email is unknown or the password
    is wrong, so the response never reveals which accounts exist.
    """

    kind = AuthErrorKind.INVALID_CREDENTIALS
    default_message = "Invalid email or password"


class InvalidTokenError(AuthenticationError):
    """A token failed signature, expiry, type or ledger (revocation) checks."""

    kind = AuthErrorKind.INVALID_TOKEN
    default_message = "Invalid token"
