"""Transaction boundary contract shared by the services."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from socialnet.repositories import RefreshTokenRepository, UserRepository


class UnitOfWork(ABC):
    """
    One transaction spanning every repository it exposes.

    Used as a context manager: leaving the block normally makes the work
    durable, leaving it with an exception discards it.

    :ivar users: Repository over :class:`~socialnet.models.user.User`.
    :ivar refresh_tokens: Repository over the refresh token ledger rows.
    """

    users: UserRepository
    refresh_tokens: RefreshTokenRepository

    def __enter__(self) -> UnitOfWork:
        return self

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
