# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .entities import NewUser, TokenClaims, User


class UserRepository(Protocol):
    def create(self, new_user: NewUser) -> User:
        """Insert atomically; raise ``UserAlreadyExistsError`` on username/mobile clash."""
        ...

    def exists(self, username: str, mobile: str) -> bool: ...
    def find_by_username(self, username: str) -> User | None: ...
    def find_by_id(self, user_id: str) -> User | None: ...
    def touch_last_login(self, user_id: str, at: datetime) -> None: ...
    def update_password_hash(self, user_id: str, password_hash: str) -> None: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...
    def needs_rehash(self, hashed: str) -> bool: ...


class TokenService(Protocol):
    def issue(self, user_id: str) -> str: ...
    def refresh(self, user_id: str) -> str: ...
    def verify(self, token: str) -> TokenClaims: ...


class TokenDenylist(Protocol):
    def revoke(self, claims: TokenClaims) -> None: ...
    def is_revoked(self, token_id: str) -> bool: ...
