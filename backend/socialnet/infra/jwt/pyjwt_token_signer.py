# socialnet/infra/jwt/pyjwt_token_signer.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import jwt

from socialnet.services._shared.errors import InvalidTokenError
from socialnet.services._shared.ports import TokenPair, TokenPayload, TokenSigner
from socialnet.services._shared.ports.token_signer import TokenType

_REQUIRED_CLAIMS = ["sub", "iat", "exp", "jti", "type"]
_HMAC_ALGORITHMS = frozenset({"HS256", "HS384", "HS512"})


@dataclass(slots=True)
class JWTTokenSigner(TokenSigner):
    """
    HMAC JWT signer on PyJWT with one secret and lifetime per token kind.

    :param access_secret: Key for access tokens.
    :param refresh_secret: Key for refresh tokens. Must differ from ``access_secret``.
    :param access_lifetime: Access token lifetime.
    :param refresh_lifetime: Refresh token lifetime.
    :param algorithm: JWS algorithm (HMAC family).
    :raises ValueError: If both secrets are equal or empty, or the algorithm
        is not an HMAC one.
    """

    access_secret: str
    refresh_secret: str
    access_lifetime: timedelta
    refresh_lifetime: timedelta
    algorithm: str = "HS256"

    def __post_init__(self) -> None:
        if not self.access_secret or not self.refresh_secret:
            raise ValueError("JWT access and refresh secrets must be set.")
        if self.access_secret == self.refresh_secret:
            raise ValueError("JWT access and refresh secrets must differ.")
        if self.algorithm not in _HMAC_ALGORITHMS:
            raise ValueError(f"Unsupported JWT algorithm: {self.algorithm!r}.")

    # -------------------- issuing --------------------

    def _sign(self, user_id: int, *, ttype: TokenType, now: datetime) -> str:
        secret, lifetime = (
            (self.access_secret, self.access_lifetime)
            if ttype == "access"
            else (self.refresh_secret, self.refresh_lifetime)
        )
        iat = int(now.timestamp())
        claims: dict[str, Any] = {
            "sub": str(user_id),
            "iat": iat,
            "exp": iat + int(lifetime.total_seconds()),
            "jti": uuid4().hex,
            "type": ttype,
        }
        return jwt.encode(claims, secret, algorithm=self.algorithm)

    def issue_pair(self, user_id: int) -> TokenPair:
        now = datetime.now(UTC)
        return TokenPair(
            access_token=self._sign(user_id, ttype="access", now=now),
            refresh_token=self._sign(user_id, ttype="refresh", now=now),
        )

    # -------------------- verification --------------------

    def verify(
        self, token: str, secret: str, *, expected_type: TokenType | None = None
    ) -> TokenPayload:
        """
        Decode ``token`` with ``secret`` and return its claims.

        :param token: Compact JWS string.
        :param secret: Key to verify the signature with.
        :param expected_type: When set, the ``type`` claim must match.
        :returns: Verified payload.
        :raises InvalidTokenError: On bad signature, malformed token, expiry,
            missing claims or type mismatch.
        """
        if not isinstance(token, str) or not token:
            raise InvalidTokenError()
        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={"require": _REQUIRED_CLAIMS},
            )
        except (jwt.PyJWTError, UnicodeError) as exc:
            raise InvalidTokenError() from exc

        sub = claims["sub"]
        ttype = claims["type"]
        if not isinstance(sub, str) or not sub.isdigit():
            raise InvalidTokenError()
        if ttype not in ("access", "refresh"):
            raise InvalidTokenError()
        if expected_type is not None and ttype != expected_type:
            raise InvalidTokenError()

        return TokenPayload(
            sub=sub,
            iat=int(claims["iat"]),
            exp=int(claims["exp"]),
            jti=str(claims["jti"]),
            type=ttype,
        )

    def verify_access(self, token: str) -> TokenPayload:
        return self.verify(token, self.access_secret, expected_type="access")

    def verify_refresh(self, token: str) -> TokenPayload:
        return self.verify(token, self.refresh_secret, expected_type="refresh")
