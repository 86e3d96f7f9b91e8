"""
socialnet.services._shared.ports
================================

*Ports* (hexagonal interfaces) the service layer depends on for credential
hashing, token signing and refresh-token bookkeeping.

Modules
-------
- :mod:`password_hasher`:
    Defines :class:`~.PasswordHasher`: salted one-way password hashing.

- :mod:`token_signer`:
    Defines :class:`~.TokenSigner`, :class:`~.TokenPayload` and
    :class:`~.TokenPair`: minting and verification of access/refresh tokens.

- :mod:`refresh_ledger`:
    Defines :class:`~.RefreshTokenLedger`, :class:`~.RefreshTokenRecord`,
    :func:`~.digest_token` and the in-memory adapter.

Concrete adapters (Werkzeug, PyJWT, SQLAlchemy, Redis) live under
``socialnet.infra``.
"""

from __future__ import annotations

from .password_hasher import PasswordHasher
from .refresh_ledger import (
    InMemoryRefreshTokenLedger,
    RefreshTokenLedger,
    RefreshTokenRecord,
    digest_token,
)
from .token_signer import TokenPair, TokenPayload, TokenSigner

__all__ = [
    "PasswordHasher",
    "TokenSigner",
    "TokenPayload",
    "TokenPair",
    "RefreshTokenLedger",
    "RefreshTokenRecord",
    "InMemoryRefreshTokenLedger",
    "digest_token",
]
