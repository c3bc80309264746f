# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True, frozen=True)
class NewUser:
    """Registration data that has passed validation, password already hashed."""

    username: str
    mobile: str
    first_name: str
    last_name: str
    password_hash: str = field(repr=False)


@dataclass(slots=True, frozen=True)
class User:

    id: str
    username: str
    mobile: str
    first_name: str
    last_name: str
    password_hash: str = field(repr=False)
    created_at: datetime
    last_login_at: datetime | None = None


@dataclass(slots=True, frozen=True)
class TokenClaims:

    user_id: str
    token_id: str
    issued_at: datetime
    expires_at: datetime
