# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import NewUser, TokenClaims, User
from .exceptions import (
    InvalidCredentialsError,
    TokenExpiredError,
    TokenInvalidError,
    UnauthorizedError,
    UserAlreadyExistsError,
    UserNotFoundError,
)

__all__ = [
    "InvalidCredentialsError",
    "NewUser",
    "TokenClaims",
    "TokenExpiredError",
    "TokenInvalidError",
    "UnauthorizedError",
    "User",
    "UserAlreadyExistsError",
    "UserNotFoundError",
]
