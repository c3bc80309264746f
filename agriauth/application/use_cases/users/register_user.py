# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass

from agriauth.domain.users.entities import NewUser, User
from agriauth.domain.users.exceptions import UserAlreadyExistsError
from agriauth.domain.users.repositories import PasswordHasher, TokenService, UserRepository
from agriauth.shared.logging import logger


@dataclass(slots=True, frozen=True)
class RegisterUserInput:
    username: str
    first_name: str
    last_name: str
    mobile: str
    password: str


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenService,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher

    def execute(self, data: RegisterUserInput) -> tuple[User, str]:
        # Cheap pre-check so duplicates never pay the hashing cost; create()
        # repeats the check atomically with the insert.
        if self._users.exists(data.username, data.mobile):
            raise UserAlreadyExistsError()
        hashed = self._password_hasher.hash(data.password)
        user = self._users.create(
            NewUser(
                username=data.username,
                mobile=data.mobile,
                first_name=data.first_name,
                last_name=data.last_name,
                password_hash=hashed,
            )
        )
        token = self._tokens.issue(user.id)
        logger.info(f"auth.register: created user_id={user.id}")
        return user, token
