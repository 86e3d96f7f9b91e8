from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol

TokenType = Literal["access", "refresh"]


@dataclass(frozen=True, slots=True)
class TokenPayload:
    """
    Verified claims of a signed token.

    :ivar sub: Subject, the user id as a string.
    :ivar iat: Issued-at (seconds since epoch).
    :ivar exp: Expiry (seconds since epoch).
    :ivar jti: Unique token id; two tokens issued in the same second differ.
    :ivar type: ``"access"`` or ``"refresh"``.
    """

    sub: str
    iat: int
    exp: int
    jti: str
    type: TokenType

    @property
    def user_id(self) -> int:
        return int(self.sub)


@dataclass(frozen=True, slots=True)
class TokenPair:
    """Access and refresh tokens minted together for one subject."""

    access_token: str
    refresh_token: str


class TokenSigner(Protocol):
    """
    Port for minting and verifying signed access/refresh tokens.

    Access and refresh tokens are signed with distinct secrets; a token of one
    kind never verifies as the other.
    """

    def issue_pair(self, user_id: int) -> TokenPair:
        """Mint a fresh access + refresh pair for ``user_id``."""
        ...

    def verify_access(self, token: str) -> TokenPayload:
        """
        Verify an access token.

        :raises InvalidTokenError: On bad signature, expiry, malformed token or wrong type.
        """
        ...

    def verify_refresh(self, token: str) -> TokenPayload:
        """
        Verify a refresh token.

        :raises InvalidTokenError: On bad signature, expiry, malformed token or wrong type.
        """
        ...
