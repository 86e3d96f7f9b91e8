from __future__ import annotations

import secrets

from werkzeug.security import check_password_hash, generate_password_hash

from socialnet.services._shared.ports import PasswordHasher


class WerkzeugPasswordHasher(PasswordHasher):
    """
    Password hashing backed by :mod:`werkzeug.security`.

    :param method: Werkzeug method string, e.g. ``"scrypt"`` or
        ``"pbkdf2:sha256:600000"``. The work factor lives in this string.
    :param salt_length: Length of the random salt generated per call.
    """

    def __init__(self, method: str = "scrypt", salt_length: int = 16) -> None:
        self.method = method
        self.salt_length = salt_length
        # Compared against when the account is unknown, keeping both paths equally slow.
        self._dummy_hash = generate_password_hash(
            secrets.token_urlsafe(16), method=method, salt_length=salt_length
        )

    def hash(self, plain: str) -> str:
        return generate_password_hash(plain, method=self.method, salt_length=self.salt_length)

    def verify(self, plain: str, hashed: str | None) -> bool:
        if not hashed:
            check_password_hash(self._dummy_hash, plain)
            return False
        try:
            return check_password_hash(hashed, plain)
        except ValueError:
            # Unknown method prefix in a stored hash
            return False
