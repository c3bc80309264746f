# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from threading import Lock

from agriauth.domain.users.entities import TokenClaims
from agriauth.domain.users.repositories import TokenDenylist
from agriauth.shared.logging import logger


def _utcnow() -> datetime:
    return datetime.now(UTC)


class InMemoryTokenDenylist(TokenDenylist):
    """Process-local set of revoked token ids, each kept until its token expires."""

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._revoked: dict[str, datetime] = {}  # jti -> expires_at
        self._lock = Lock()
        self._clock = clock

    def revoke(self, claims: TokenClaims) -> None:
        if not claims.token_id:
            return
        with self._lock:
            self._prune()
            self._revoked[claims.token_id] = claims.expires_at
        logger.info(f"token_denylist: revoked token for user={claims.user_id}")

    def is_revoked(self, token_id: str) -> bool:
        if not token_id:
            return False
        with self._lock:
            expires_at = self._revoked.get(token_id)
            if expires_at is None:
                return False
            if expires_at <= self._clock():
                del self._revoked[token_id]
                return False
            return True

    def __len__(self) -> int:
        with self._lock:
            self._prune()
            return len(self._revoked)

    def _prune(self) -> None:
        now = self._clock()
        for token_id in [jti for jti, exp in self._revoked.items() if exp <= now]:
            del self._revoked[token_id]


__all__ = ["InMemoryTokenDenylist"]
