from __future__ import annotations

from typing import Protocol


class PasswordHasher(Protocol):
    """Port for one-way, salted password hashing."""

    def hash(self, plain: str) -> str:
        """Return a salted hash; hashing the same input twice gives different strings."""
        ...

    def verify(self, plain: str, hashed: str | None) -> bool:
        """
        Check ``plain`` against ``hashed``.

        ``hashed=None`` (unknown account) must still cost a full comparison and
        return ``False``.
        """
        ...
