# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
from typing import Any

SENSITIVE_PATTERNS = [
    # Secrets
    (r"(jwt[_-]?secret\s*[:=]\s*['\"]?)([^\s'\",]{6,})(['\"]?)", r"\1***REDACTED***\3", re.IGNORECASE),
    (r"(secret[_-]?key\s*[:=]\s*['\"]?)([^\s'\",]{6,})(['\"]?)", r"\1***REDACTED***\3", re.IGNORECASE),

    # Tokens
    (r"(bearer\s+)([a-zA-Z0-9_\-\.]{20,})", r"\1***REDACTED***", re.IGNORECASE),
    (r"(token\s*[:=]\s*['\"]?)([a-zA-Z0-9_\-\.]{20,})(['\"]?)", r"\1***REDACTED***\3", re.IGNORECASE),
    (r"\beyJ[a-zA-Z0-9_\-]+\.[a-zA-Z0-9_\-]+\.[a-zA-Z0-9_\-]+", r"***JWT***"),

    # Password hashes (bcrypt)
    (r"\$2[aby]?\$\d{2}\$[./A-Za-z0-9]{53}", r"***HASH***"),

    # Passwords
    (r"(password(?:_hash)?\s*[:=]\s*['\"]?)([^'\"\s,}]{1,})(['\"]?)", r"\1***REDACTED***\3", re.IGNORECASE),
    (r"(passwd\s*[:=]\s*['\"]?)([^'\"\s,}]{1,})(['\"]?)", r"\1***REDACTED***\3", re.IGNORECASE),

    # Database URLs with credentials
    (r"(postgres(?:ql)?|mysql|mongodb)://([^:]+):([^@]+)@", r"\1://\2:***REDACTED***@"),

    # Mobile numbers (10-digit, leading 6-9, optional +91)
    (r"(mobile\s*[:=]\s*['\"]?)(\+?\d{10,13})(['\"]?)", r"\1******\3", re.IGNORECASE),
    (r"(?<!\d)(?:\+?91[- ]?)?[6-9]\d{9}(?!\d)", r"******"),

    # Authorization headers
    (r"(authorization\s*:\s*['\"]?)([^'\"]{10,})(['\"]?)", r"\1***REDACTED***\3", re.IGNORECASE),
]

_COMPILED = [
    re.compile(pattern, flags[0] if flags else 0) for pattern, _, *flags in SENSITIVE_PATTERNS
]
_REPLACEMENTS = [replacement for _, replacement, *_ in SENSITIVE_PATTERNS]


def sanitize_message(message: str) -> str:
    sanitized = message
    for regex, replacement in zip(_COMPILED, _REPLACEMENTS):
        sanitized = regex.sub(replacement, sanitized)
    return sanitized


def sanitize_record(record: dict[str, Any]) -> bool:
    if "message" in record:
        record["message"] = sanitize_message(record["message"])
    return True
