# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Request, g, request


def resolve_client_address(req: Request) -> str:
    # Forwarded headers are applied by ProxyFix only when proxies are configured.
    return req.remote_addr or "unknown"


def client_address() -> str:
    """Address resolved for the current request, see ``configure_request_logging``."""

    cached = getattr(g, "client_address", None)
    if cached:
        return cached
    return resolve_client_address(request)


__all__ = ["client_address", "resolve_client_address"]
