# socialnet/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass

from socialnet.services.users.dto import UserPublicOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for registration. Format is validated at the gateway.

    :param username: Desired public handle.
    :type username: str
    :param email: Email (normalized by the model).
    :type email: str
    :param password: Raw password (hashed by the service).
    :type password: str
    :param display_name: Defaults to ``username`` when omitted.
    :type display_name: str | None
    """

    username: str
    email: str
    password: str
    first_name: str | None = None
    last_name: str | None = None
    display_name: str | None = None


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class AuthSessionOut:
    """
    Result of register/login: sanitized user plus a fresh token pair.

    :param user: Sanitized user.
    :type user: UserPublicOut
    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT (already recorded in the ledger).
    :type refresh_token: str
    """

    user: UserPublicOut
    access_token: str
    refresh_token: str
