"""Ledger row for an issued refresh token."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from socialnet.core.extensions import db

from .base import CreatedAtMixin, PKMixin, ReprMixin


class RefreshToken(PKMixin, ReprMixin, CreatedAtMixin, db.Model):
    """
    One issued refresh token, identified by the digest of its signed string.

    Rows are only ever inserted or flipped to ``is_revoked=True``; they are
    kept after expiry for auditing.

    Fields
    ------
    token : str
        SHA-256 hex digest of the raw refresh token (the raw value is never
        stored).
    user_id : int
        Owner of the session.
    is_revoked : bool
        Set once the token is rotated or logged out.
    expires_at : datetime
        Absolute expiry (UTC).
    """

    __tablename__ = "refresh_tokens"

    token: Mapped[str] = mapped_column(String(64), nullable=False)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    is_revoked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_refresh_tokens_token", "token"),
        Index("ix_refresh_tokens_user_active", "user_id", "is_revoked", "expires_at"),
    )
