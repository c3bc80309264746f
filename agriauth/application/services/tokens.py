# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed bearer tokens."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from jose import ExpiredSignatureError, JWTError, jwt

from agriauth.domain.users.entities import TokenClaims
from agriauth.domain.users.exceptions import TokenExpiredError, TokenInvalidError
from agriauth.domain.users.repositories import TokenService
from agriauth.shared.logging import logger

DEFAULT_TTL = timedelta(days=7)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class JwtTokenService(TokenService):
    """Issues and verifies HMAC-signed JWTs.

    Tokens are stateless: nothing is stored server-side, so a token stays
    valid until its own ``exp`` unless a denylist is consulted by the caller.
    """

    def __init__(
        self,
        secret: str,
        *,
        ttl: timedelta = DEFAULT_TTL,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("token signing secret must not be empty")
        if ttl <= timedelta(0):
            raise ValueError("token ttl must be positive")
        self._secret = secret
        self._ttl = ttl
        self._algorithm = algorithm
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, user_id: str) -> str:
        issued_at = self._clock()
        expires_at = issued_at + self._ttl
        claims = {
            "sub": user_id,
            "userId": user_id,
            "jti": uuid.uuid4().hex,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(claims, self._secret, algorithm=self._algorithm)
        logger.debug(f"tokens.issue: user={user_id} exp={expires_at.isoformat()}")
        return token

    def refresh(self, user_id: str) -> str:
        # Earlier tokens for the same user are left untouched.
        return self.issue(user_id)

    def verify(self, token: str) -> TokenClaims:
        if not token:
            raise TokenInvalidError()
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except JWTError as exc:
            raise TokenInvalidError() from exc

        user_id = payload.get("sub") or payload.get("userId")
        issued_at = payload.get("iat")
        expires_at = payload.get("exp")
        if not isinstance(user_id, str) or not isinstance(expires_at, int):
            raise TokenInvalidError()
        return TokenClaims(
            user_id=user_id,
            token_id=str(payload.get("jti") or ""),
            issued_at=datetime.fromtimestamp(issued_at or expires_at, UTC),
            expires_at=datetime.fromtimestamp(expires_at, UTC),
        )
