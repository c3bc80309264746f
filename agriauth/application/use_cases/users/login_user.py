# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime

from agriauth.domain.users.entities import User
from agriauth.domain.users.exceptions import InvalidCredentialsError
from agriauth.domain.users.repositories import PasswordHasher, TokenService, UserRepository
from agriauth.shared.errors.base import StorageError
from agriauth.shared.logging import logger

# Verified against when the username is unknown so both failure paths pay the
# same hashing cost.
_DUMMY_PASSWORD = "agriauth-timing-equaliser"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenService,
        password_hasher: PasswordHasher,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher
        self._clock = clock
        self._dummy_hash = password_hasher.hash(_DUMMY_PASSWORD)

    def execute(self, username: str, password: str) -> tuple[User, str]:
        user = self._users.find_by_username(username)
        if user is None:
            self._password_hasher.verify(password, self._dummy_hash)
            raise InvalidCredentialsError()
        if not self._password_hasher.verify(password, user.password_hash):
            raise InvalidCredentialsError()

        if self._password_hasher.needs_rehash(user.password_hash):
            user = self._rehash(user, password)

        token = self._tokens.issue(user.id)

        now = self._clock()
        try:
            self._users.touch_last_login(user.id, now)
            user = replace(user, last_login_at=now)
        except StorageError:
            logger.warning(f"auth.login: could not record last login for user_id={user.id}")

        return user, token

    def _rehash(self, user: User, password: str) -> User:
        """Upgrade a hash made with an older work factor; failure keeps the old one."""

        new_hash = self._password_hasher.hash(password)
        try:
            self._users.update_password_hash(user.id, new_hash)
        except StorageError:
            logger.warning(f"auth.login: could not upgrade password hash for user_id={user.id}")
            return user
        logger.info(f"auth.login: upgraded password hash for user_id={user.id}")
        return replace(user, password_hash=new_hash)
