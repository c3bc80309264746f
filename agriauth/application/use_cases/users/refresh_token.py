# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from agriauth.domain.users.repositories import TokenService


class RefreshTokenUseCase:
    """Re-issue a token for an already authenticated caller.

    The previous token is not invalidated; it expires on its own schedule.
    """

    def __init__(self, *, tokens: TokenService) -> None:
        self._tokens = tokens

    def execute(self, user_id: str) -> str:
        return self._tokens.refresh(user_id)
