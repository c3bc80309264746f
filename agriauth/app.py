# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from agriauth.container import Container
from agriauth.shared.config import AppConfig, load_config
from agriauth.shared.logging import logger, setup_logging
from agriauth.shared.middleware.error_handler import configure_error_handling
from agriauth.shared.middleware.rate_limit import configure_rate_limiting
from agriauth.shared.middleware.request_logger import configure_request_logging


def create_app(config: AppConfig | None = None, container: Container | None = None) -> Flask:
    if container is None:
        container = Container(config or load_config())
    config = container.config

    setup_logging(level=config.log_level, log_file=config.log_file)
    container.database.create_all()

    app = Flask(__name__)
    app.json.sort_keys = False  # type: ignore[attr-defined]
    app.extensions["agriauth.container"] = container
    if config.security.trusted_proxy_count:
        proxies = config.security.trusted_proxy_count
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=proxies, x_proto=proxies)  # type: ignore[method-assign]

    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_request_logging(app, debug_mode=config.debug_logging)
    configure_rate_limiting(app, container.rate_limiters)

    cors_kwargs: dict[str, object] = {
        "resources": {f"{config.api_prefix}/auth/*": {"origins": config.security.allowed_origins}},
        "expose_headers": ["RateLimit-Limit", "RateLimit-Remaining", "RateLimit-Reset"],
    }
    CORS(app, **cors_kwargs)
    app.register_blueprint(container.auth_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cache-Control", "no-store")
        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return resp

    logger.info(
        f"Flask app initialized (prefix='{config.api_prefix or '/'}', "
        f"rate_limit={'on' if container.rate_limiters else 'off'}, "
        f"revocation={'on' if container.token_denylist else 'off'})"
    )
    return app
