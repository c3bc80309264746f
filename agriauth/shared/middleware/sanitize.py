# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Strip script markup from incoming request data.

This is a defense-in-depth pass over body, query and path parameters. It is
not a substitute for encoding output where user data is rendered.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import g, request

_SCRIPT_TAG_RE = re.compile(
    r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE
)
_JS_SCHEME_RE = re.compile(r"javascript:", re.IGNORECASE)


def sanitize_string(value: str) -> str:
    value = _SCRIPT_TAG_RE.sub("", value)
    value = _JS_SCHEME_RE.sub("", value)
    return value.strip()


def sanitize_value(value: Any) -> Any:
    if isinstance(value, str):
        return sanitize_string(value)
    if isinstance(value, dict):
        return {key: sanitize_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [sanitize_value(item) for item in value]
    return value


def sanitize_input(f: Callable):
    @wraps(f)
    def wrapper(*args, **kwargs):
        g.sanitized_body = sanitize_value(request.get_json(silent=True))
        g.sanitized_query = {
            key: [sanitize_string(v) for v in values]
            for key, values in request.args.lists()
        }
        return f(*args, **sanitize_value(kwargs))

    return wrapper


def sanitized_body() -> Any:
    """Request JSON after sanitization; falls back to the raw body outside ``sanitize_input``."""

    if "sanitized_body" in g:
        return g.sanitized_body
    return request.get_json(silent=True)


__all__ = ["sanitize_input", "sanitize_string", "sanitize_value", "sanitized_body"]
