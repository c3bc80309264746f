from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from agriauth.domain.users.entities import User

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")
NAME_PATTERN = re.compile(r"^[a-zA-Z\s]+$", re.ASCII)
MOBILE_PATTERN = re.compile(r"^[6-9][0-9]{9}$")
PASSWORD_SYMBOLS = "@$!%*?&"

FIELD_LABELS = {
    "username": "Username",
    "firstName": "First name",
    "lastName": "Last name",
    "mobile": "Mobile number",
    "password": "Password",
}


def _check_length(value: str, label: str, min_length: int, max_length: int | None) -> None:
    if len(value) < min_length:
        raise PydanticCustomError(
            "string_too_short",
            "{label} must be at least {min_length} characters long",
            {"label": label, "min_length": min_length},
        )
    if max_length is not None and len(value) > max_length:
        raise PydanticCustomError(
            "string_too_long",
            "{label} cannot exceed {max_length} characters",
            {"label": label, "max_length": max_length},
        )


def _check_name(value: str, label: str) -> str:
    _check_length(value, label, 2, 50)
    if not NAME_PATTERN.match(value):
        raise PydanticCustomError(
            "name_invalid_chars",
            "{label} should only contain letters and spaces",
            {"label": label},
        )
    return value


class SignupRequestDTO(BaseModel):
    """Registration payload; unknown keys are dropped."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, populate_by_name=True)

    username: str
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    mobile: str
    password: str

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        _check_length(value, "Username", 3, 50)
        if not USERNAME_PATTERN.match(value):
            raise PydanticCustomError(
                "username_invalid_chars",
                "Username should only contain letters, numbers, and underscores",
                {"pattern": USERNAME_PATTERN.pattern},
            )
        return value

    @field_validator("first_name")
    @classmethod
    def validate_first_name(cls, value: str) -> str:
        return _check_name(value, "First name")

    @field_validator("last_name")
    @classmethod
    def validate_last_name(cls, value: str) -> str:
        return _check_name(value, "Last name")

    @field_validator("mobile")
    @classmethod
    def validate_mobile(cls, value: str) -> str:
        if not MOBILE_PATTERN.match(value):
            raise PydanticCustomError(
                "mobile_invalid",
                "Mobile number must be a valid 10-digit Indian mobile number",
                {"pattern": MOBILE_PATTERN.pattern},
            )
        return value

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, value: str) -> str:
        _check_length(value, "Password", 8, 128)
        checks = (
            re.search(r"[a-z]", value),
            re.search(r"[A-Z]", value),
            re.search(r"[0-9]", value),
            any(ch in PASSWORD_SYMBOLS for ch in value),
        )
        if not all(checks):
            raise PydanticCustomError(
                "password_weak",
                "Password must contain at least one uppercase letter, one lowercase "
                "letter, one number, and one special character ({symbols})",
                {"symbols": PASSWORD_SYMBOLS},
            )
        return value


class LoginRequestDTO(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    username: str
    password: str  # No strength check on login

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        if len(value) < 3:
            raise PydanticCustomError("string_too_short", "Username is required", {})
        return value

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value:
            raise PydanticCustomError("string_too_short", "Password is required", {})
        return value


class UserDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    username: str
    first_name: str = Field(serialization_alias="firstName")
    last_name: str = Field(serialization_alias="lastName")
    mobile: str
    created_at: datetime = Field(serialization_alias="createdAt")
    last_login_at: datetime | None = Field(default=None, serialization_alias="lastLoginAt")

    @classmethod
    def from_domain(cls, user: User) -> UserDTO:
        return cls(
            id=user.id,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            mobile=user.mobile,
            created_at=user.created_at,
            last_login_at=user.last_login_at,
        )

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
