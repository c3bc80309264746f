"""Use-case for ending a session."""

from __future__ import annotations

from agriauth.domain.users.entities import TokenClaims
from agriauth.domain.users.repositories import TokenDenylist


class LogoutUserUseCase:
    def __init__(self, *, denylist: TokenDenylist | None = None) -> None:
        self._denylist = denylist

    def execute(self, claims: TokenClaims) -> bool:
        """Return whether the token was revoked server-side.

        Without a denylist logout is stateless and the client simply discards
        its token.
        """

        if self._denylist is None:
            return False
        self._denylist.revoke(claims)
        return True
