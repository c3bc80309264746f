# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, cast


@dataclass(slots=True, frozen=True)
class FieldError:
    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass(slots=True)
class AppError(Exception):
    code: str
    status: HTTPStatus
    message: str = "Request failed"
    errors: Sequence[FieldError] = field(default_factory=tuple)
    headers: Mapping[str, str] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "success": False,
            "error": self.code,
            "message": self.message,
        }
        if self.errors:
            payload["errors"] = [error.to_dict() for error in self.errors]
        return payload


class DomainError(AppError):
    def __init__(
        self,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        message: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        resolved_code = code or cast(str, getattr(self, "code", "domain_error"))
        resolved_status = status or cast(
            HTTPStatus, getattr(self, "status", HTTPStatus.BAD_REQUEST)
        )
        resolved_message = message or cast(str, getattr(self, "message", "Request failed"))
        super().__init__(
            code=resolved_code,
            status=resolved_status,
            message=resolved_message,
            headers=headers,
        )


class InfrastructureError(AppError):
    def __init__(
        self,
        code: str = "infrastructure_error",
        *,
        status: HTTPStatus | None = None,
        message: str = "Internal server error",
    ) -> None:
        resolved_status = status or HTTPStatus.INTERNAL_SERVER_ERROR
        super().__init__(code=code, status=resolved_status, message=message)


class StorageError(InfrastructureError):
    """Opaque credential-store failure; details stay in the server log."""

    def __init__(self) -> None:
        super().__init__(code="storage_error")


class ValidationError(AppError):
    def __init__(
        self,
        errors: Sequence[FieldError] = (),
        *,
        code: str = "validation_error",
        message: str = "Validation failed",
    ) -> None:
        super().__init__(
            code=code,
            status=HTTPStatus.BAD_REQUEST,
            message=message,
            errors=tuple(errors),
        )


class RateLimitedError(AppError):
    def __init__(self, message: str, *, retry_after: int, headers: Mapping[str, str]) -> None:
        super().__init__(
            code="rate_limited",
            status=HTTPStatus.TOO_MANY_REQUESTS,
            message=message,
            headers={**headers, "Retry-After": str(retry_after)},
        )
