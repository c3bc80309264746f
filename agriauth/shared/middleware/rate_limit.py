# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import math
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from functools import wraps
from threading import Lock
from typing import Protocol

from flask import Flask, current_app, g

from agriauth.infrastructure.audit import AuditAction, audit_log
from agriauth.shared.errors.base import RateLimitedError
from agriauth.shared.logging import logger
from agriauth.shared.middleware.client_address import client_address

EXTENSION_KEY = "agriauth.rate_limiters"


class EndpointClass(StrEnum):
    AUTH = "auth"
    GENERAL = "general"


ADVISORY_MESSAGES: dict[EndpointClass, str] = {
    EndpointClass.AUTH: "Too many authentication attempts, please try again later",
    EndpointClass.GENERAL: "Too many requests, please try again later",
}


@dataclass(slots=True, frozen=True)
class WindowState:
    started_at: float
    count: int


@dataclass(slots=True, frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_after: int

    def headers(self) -> dict[str, str]:
        return {
            "RateLimit-Limit": str(self.limit),
            "RateLimit-Remaining": str(self.remaining),
            "RateLimit-Reset": str(self.reset_after),
        }


class RateLimitStore(Protocol):
    def hit(self, key: str, window_seconds: float, now: float) -> WindowState: ...
    def reset(self, key: str | None = None) -> None: ...


class InMemoryRateLimitStore(RateLimitStore):
    """Fixed windows per key, guarded by one lock; suitable for a single process."""

    PRUNE_THRESHOLD = 10_000

    def __init__(self) -> None:
        self._windows: dict[str, WindowState] = {}
        self._lock = Lock()

    def hit(self, key: str, window_seconds: float, now: float) -> WindowState:
        with self._lock:
            if len(self._windows) >= self.PRUNE_THRESHOLD:
                self._prune(window_seconds, now)
            current = self._windows.get(key)
            if current is None or now - current.started_at > window_seconds:
                current = WindowState(started_at=now, count=0)
            updated = WindowState(started_at=current.started_at, count=current.count + 1)
            self._windows[key] = updated
            return updated

    def reset(self, key: str | None = None) -> None:
        with self._lock:
            if key is None:
                self._windows.clear()
            else:
                self._windows.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    def _prune(self, window_seconds: float, now: float) -> None:
        stale = [k for k, w in self._windows.items() if now - w.started_at > window_seconds]
        for k in stale:
            del self._windows[k]


class RateLimiter:
    def __init__(
        self,
        limit: int,
        window_seconds: float,
        store: RateLimitStore | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._limit = max(1, int(limit))
        self._window = max(0.1, float(window_seconds))
        self._store = store if store is not None else InMemoryRateLimitStore()
        self._clock = clock

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> float:
        return self._window

    def check(self, key: str) -> RateLimitDecision:
        now = self._clock()
        state = self._store.hit(key, self._window, now)
        reset_after = max(0, math.ceil(self._window - (now - state.started_at)))
        return RateLimitDecision(
            allowed=state.count <= self._limit,
            limit=self._limit,
            remaining=max(0, self._limit - state.count),
            reset_after=reset_after,
        )

    def allow(self, key: str) -> bool:
        return self.check(key).allowed

    def reset(self, key: str | None = None) -> None:
        self._store.reset(key)


def configure_rate_limiting(
    app: Flask, limiters: Mapping[EndpointClass, RateLimiter] | None
) -> None:
    """Attach limiters to the app; ``None`` disables limiting entirely."""

    app.extensions[EXTENSION_KEY] = dict(limiters) if limiters else {}

    @app.after_request
    def _add_rate_limit_headers(resp):
        decision: RateLimitDecision | None = getattr(g, "rate_limit_decision", None)
        if decision is not None:
            for name, value in decision.headers().items():
                resp.headers.setdefault(name, value)
        return resp


def rate_limit(endpoint_class: EndpointClass):
    def decorator(f: Callable):
        @wraps(f)
        def wrapper(*args, **kwargs):
            limiters: dict[EndpointClass, RateLimiter] = current_app.extensions.get(
                EXTENSION_KEY, {}
            )
            limiter = limiters.get(endpoint_class)
            if limiter is None:
                return f(*args, **kwargs)

            address = client_address()
            decision = limiter.check(f"{endpoint_class.value}:{address}")
            g.rate_limit_decision = decision
            if not decision.allowed:
                audit_log(
                    AuditAction.RATE_LIMITED,
                    ip_address=address,
                    details={"endpoint_class": endpoint_class.value},
                    success=False,
                )
                logger.warning(
                    f"rate_limit: {endpoint_class.value} limit exceeded from {address}"
                )
                raise RateLimitedError(
                    ADVISORY_MESSAGES[endpoint_class],
                    retry_after=decision.reset_after,
                    headers=decision.headers(),
                )
            return f(*args, **kwargs)

        return wrapper

    return decorator


__all__ = [
    "ADVISORY_MESSAGES",
    "EndpointClass",
    "InMemoryRateLimitStore",
    "RateLimitDecision",
    "RateLimitStore",
    "RateLimiter",
    "WindowState",
    "configure_rate_limiting",
    "rate_limit",
]
