# socialnet/services/auth/service.py
from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError

from socialnet.models.user import User
from socialnet.services._shared.base import BaseService, RoUowFactory, UowFactory
from socialnet.services._shared.errors import (
    DuplicateEmailError,
    DuplicateUsernameError,
    InvalidCredentialsError,
    InvalidTokenError,
    violates,
)
from socialnet.services._shared.ports import (
    PasswordHasher,
    RefreshTokenLedger,
    TokenPair,
    TokenPayload,
    TokenSigner,
)
from socialnet.services.auth.dto import AuthSessionOut, LoginIn, RegisterIn, TokenPairOut
from socialnet.services.users.dto import UserPublicOut, to_user_public
from socialnet.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)


class SessionManager(BaseService):
    """
    Authentication lifecycle service (register / login / refresh / logout).

    Credentials are checked through a :class:`PasswordHasher`, tokens minted
    by a :class:`TokenSigner`, and every issued refresh token is recorded in a
    :class:`RefreshTokenLedger`, which alone decides whether a refresh token
    is still usable.

    Expected failures surface as typed service errors
    (:class:`DuplicateEmailError`, :class:`DuplicateUsernameError`,
    :class:`InvalidCredentialsError`, :class:`InvalidTokenError`).
    """

    def __init__(
        self,
        *,
        hasher: PasswordHasher,
        signer: TokenSigner,
        ledger: RefreshTokenLedger,
        uow_factory: UowFactory = SQLAlchemyUnitOfWork,
        ro_uow_factory: RoUowFactory = SQLAlchemyReadOnlyUnitOfWork,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param hasher: Salted password hashing.
        :param signer: Access/refresh token minting and verification.
        :param ledger: Refresh token bookkeeping.
        :param uow_factory: Read-write Unit of Work factory for users.
        :param ro_uow_factory: Read-only Unit of Work factory for users.
        """
        super().__init__(uow_factory=uow_factory, ro_uow_factory=ro_uow_factory)
        self.hasher = hasher
        self.signer = signer
        self.ledger = ledger

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _open_session(self, user_id: int) -> TokenPair:
        """Mint a token pair and record its refresh half in the ledger."""
        pair = self.signer.issue_pair(user_id)
        self.ledger.save(pair.refresh_token, user_id)
        return pair

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> AuthSessionOut:
        """
        Create an account and open its first session.

        Email is checked before username. The unique indexes remain the
        backstop for concurrent registrations and map to the same errors.

        :param dto: Registration input (already format-validated).
        :returns: Sanitized user plus a token pair.
        :raises DuplicateEmailError: If the email is taken.
        :raises DuplicateUsernameError: If the username is taken.
        """
        with self.ro_uow() as uow:
            if uow.users.exists_by_email(dto.email):
                raise DuplicateEmailError()
            if uow.users.exists_by_username(dto.username):
                raise DuplicateUsernameError()

        password_hash = self.hasher.hash(dto.password)

        try:
            with self.rw_uow() as uow:
                user = uow.users.add(
                    User(
                        email=dto.email,
                        username=dto.username,
                        password_hash=password_hash,
                        first_name=dto.first_name,
                        last_name=dto.last_name,
                        display_name=dto.display_name or dto.username,
                    )
                )
                user_out = to_user_public(user)
        except IntegrityError as exc:
            if violates(exc, "uq_users_email", "users.email"):
                raise DuplicateEmailError() from exc
            if violates(exc, "uq_users_username", "users.username"):
                raise DuplicateUsernameError() from exc
            raise

        pair = self._open_session(user_out.id)
        log.info("auth.register", extra={"user_id": user_out.id})
        return AuthSessionOut(
            user=user_out,
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
        )

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> AuthSessionOut:
        """
        Authenticate credentials and open a new session.

        Unknown email, wrong password and deactivated account all raise the
        same :class:`InvalidCredentialsError` after a full hash comparison.

        :param dto: Login input.
        :returns: Sanitized user plus a token pair.
        :raises InvalidCredentialsError: If credentials are invalid.
        """
        with self.rw_uow() as uow:
            user = uow.users.get_by_email(dto.email)
            hashed = user.password_hash if user is not None and user.is_active else None
            verified = self.hasher.verify(dto.password, hashed)
            if user is None or not verified:
                log.info("auth.login.failed", extra={"reason": "invalid_credentials"})
                raise InvalidCredentialsError()

            uow.users.touch_last_active(user, datetime.now(UTC))
            user_out = to_user_public(user)

        pair = self._open_session(user_out.id)
        log.info("auth.login", extra={"user_id": user_out.id})
        return AuthSessionOut(
            user=user_out,
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
        )

    # ------------------------------------------------------------------ #
    # Refresh (rotation)
    # ------------------------------------------------------------------ #

    def refresh(self, raw_refresh_token: str) -> TokenPairOut:
        """
        Exchange a refresh token for a new pair, consuming the presented one.

        :param raw_refresh_token: Refresh token as presented by the client.
        :returns: New access/refresh pair.
        :raises InvalidTokenError: On bad signature or expiry, when the ledger
            has no active record, when the account is gone or inactive,
            or when a concurrent refresh consumed it first.
        """
        try:
            payload = self.signer.verify_refresh(raw_refresh_token)
        except InvalidTokenError:
            log.info("auth.refresh.rejected", extra={"reason": "signature"})
            raise

        record = self.ledger.find_active(raw_refresh_token, payload.user_id)
        if record is None:
            log.info(
                "auth.refresh.rejected",
                extra={"reason": "not_active", "user_id": payload.user_id},
            )
            raise InvalidTokenError()

        with self.ro_uow() as uow:
            user = uow.users.get(payload.user_id)
            active = user is not None and user.is_active
        if not active:
            log.info(
                "auth.refresh.rejected",
                extra={"reason": "inactive", "user_id": payload.user_id},
            )
            raise InvalidTokenError()

        if not self.ledger.revoke(record.id):
            log.info(
                "auth.refresh.rejected",
                extra={"reason": "already_consumed", "user_id": payload.user_id},
            )
            raise InvalidTokenError()

        # Outstanding access tokens stay valid until their own expiry.
        pair = self._open_session(payload.user_id)
        log.info("auth.refresh", extra={"user_id": payload.user_id})
        return TokenPairOut(access_token=pair.access_token, refresh_token=pair.refresh_token)

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, user_id: int, raw_refresh_token: str | None) -> None:
        """
        Best-effort revocation of the presented refresh token.

        Never raises: a missing token is a no-op and ledger failures are
        reported by the ledger as ``False``.

        :param user_id: Authenticated user.
        :param raw_refresh_token: Refresh token to revoke, if the client sent one.
        """
        if not raw_refresh_token:
            log.info("auth.logout", extra={"user_id": user_id, "reason": "no_token"})
            return

        revoked = self.ledger.revoke_by_raw_token(raw_refresh_token)
        log.info(
            "auth.logout",
            extra={"user_id": user_id, "reason": "revoked" if revoked else "not_revoked"},
        )

    # ------------------------------------------------------------------ #
    # Access tokens
    # ------------------------------------------------------------------ #

    def validate_access_token(self, token: str) -> TokenPayload:
        """
        Verify an access token.

        :raises InvalidTokenError: On any signature, expiry or type failure.
        """
        return self.signer.verify_access(token)

    def current_user(self, payload: TokenPayload) -> UserPublicOut:
        """
        Resolve the sanitized user behind a verified access token.

        :raises InvalidTokenError: If the account no longer exists or is inactive.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(payload.user_id)
            if user is None or not user.is_active:
                raise InvalidTokenError()
            return to_user_public(user)
