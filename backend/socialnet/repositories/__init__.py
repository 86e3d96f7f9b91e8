"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from socialnet.repositories.base import BaseRepository
from socialnet.repositories.refresh_token import RefreshTokenRepository
from socialnet.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "RefreshTokenRepository",
]
