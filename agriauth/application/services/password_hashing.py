"""Password hashing strategies."""

from __future__ import annotations

import base64
import hashlib

import bcrypt

from agriauth.domain.users.repositories import PasswordHasher

DEFAULT_ROUNDS = 12


def _prepare(password: str) -> bytes:
    # bcrypt only reads the first 72 bytes; digest first so long passwords
    # keep every character significant.
    digest = hashlib.sha256(password.encode("utf-8")).digest()
    return base64.b64encode(digest)


class BcryptPasswordHasher(PasswordHasher):
    """Adaptive bcrypt hashing; salt and cost travel inside the hash string."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        if not 4 <= rounds <= 31:
            raise ValueError("bcrypt rounds must be between 4 and 31")
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(_prepare(password), salt).decode("ascii")

    def verify(self, password: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(_prepare(password), hashed.encode("ascii"))
        except (ValueError, TypeError, UnicodeEncodeError):
            return False

    def needs_rehash(self, hashed: str) -> bool:
        """Return whether ``hashed`` was produced with a different work factor."""

        try:
            return int(hashed.split("$")[2]) != self._rounds
        except (IndexError, ValueError):
            return True
