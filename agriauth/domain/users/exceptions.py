# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from agriauth.shared.errors.base import DomainError

_BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


class UserAlreadyExistsError(DomainError):
    code = "user_already_exists"
    status = HTTPStatus.CONFLICT
    message = "User with this username or mobile number already exists"


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED
    message = "Invalid username or password"


class UnauthorizedError(DomainError):
    code = "unauthorized"
    status = HTTPStatus.UNAUTHORIZED
    message = "Access token is missing or invalid"

    def __init__(self, *, message: str | None = None) -> None:
        super().__init__(message=message, headers=_BEARER_CHALLENGE)


class UserNotFoundError(UnauthorizedError):
    """The token is valid but its account no longer exists."""

    code = "user_not_found"
    message = "User not found"


class TokenInvalidError(UnauthorizedError):
    code = "token_invalid"
    message = "Invalid token"


class TokenExpiredError(UnauthorizedError):
    code = "token_expired"
    message = "Token has expired"
