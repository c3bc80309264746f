# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from typing import NoReturn

from pydantic import ValidationError as PydanticValidationError

from .base import FieldError, ValidationError

_GENERIC_MESSAGES = {
    "missing": "{label} is required",
    "string_type": "{label} must be a string",
}


def format_pydantic_errors(
    exc: PydanticValidationError, labels: Mapping[str, str] | None = None
) -> list[FieldError]:
    """Flatten pydantic errors into one ``FieldError`` per violation, in field order."""

    labels = labels or {}
    errors: list[FieldError] = []
    for error in exc.errors():
        loc = error.get("loc", ())
        field_path = ".".join(str(part) for part in loc if part is not None) or "body"
        label = labels.get(field_path, field_path)
        template = _GENERIC_MESSAGES.get(error.get("type", ""))
        message = template.format(label=label) if template else error.get("msg", "Invalid value")
        errors.append(FieldError(field=field_path, message=message))
    return errors


def raise_validation_error(
    exc: PydanticValidationError, labels: Mapping[str, str] | None = None
) -> NoReturn:
    raise ValidationError(format_pydantic_errors(exc, labels)) from exc


__all__ = [
    "format_pydantic_errors",
    "raise_validation_error",
]
