from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import pytest

os.environ.setdefault("JWT_SECRET", "test-secret-value-for-the-suite-only-0123456789")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from agriauth.app import create_app  # noqa: E402
from agriauth.container import Container  # noqa: E402
from agriauth.shared.config.settings import (  # noqa: E402
    AppConfig,
    DatabaseConfig,
    SecurityConfig,
)

TEST_SECRET = "test-secret-value-for-the-suite-only-0123456789"

VALID_SIGNUP = {
    "username": "farmer_joe",
    "firstName": "Joe",
    "lastName": "Smith",
    "mobile": "9876543210",
    "password": "Str0ng!Pass",
}


def make_config(tmp_path: Path, **overrides) -> AppConfig:
    """Build an isolated config; overrides use the environment variable names."""

    security = overrides.pop("security", None) or SecurityConfig(_env_file=None)
    values = {
        "JWT_SECRET": TEST_SECRET,
        "BCRYPT_ROUNDS": 4,
        "database": DatabaseConfig(
            _env_file=None, DATABASE_URL=f"sqlite:///{tmp_path / 'agriauth.db'}"
        ),
        "security": security,
    }
    values.update(overrides)
    return AppConfig(_env_file=None, **values)


@pytest.fixture()
def config(tmp_path: Path) -> AppConfig:
    return make_config(tmp_path)


@pytest.fixture()
def container(config: AppConfig) -> Iterator[Container]:
    built = Container(config)
    yield built
    built.database.dispose()


@pytest.fixture()
def app(container: Container) -> Flask:
    return create_app(container=container)


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()
