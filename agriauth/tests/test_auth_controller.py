from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import cast
from unittest.mock import MagicMock

import pytest
from flask import Flask

from agriauth.application.use_cases.users.register_user import (
    RegisterUserInput,
    RegisterUserUseCase,
)
from agriauth.domain.users.entities import TokenClaims, User
from agriauth.domain.users.exceptions import (
    InvalidCredentialsError,
    TokenExpiredError,
    UserAlreadyExistsError,
)
from agriauth.interfaces.http.controllers.auth_controller import AuthController
from agriauth.shared.middleware.error_handler import configure_error_handling

from .conftest import VALID_SIGNUP

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


def _user(**changes) -> User:
    values = {
        "id": "3f0c3c1e-0000-4000-8000-000000000001",
        "username": "farmer_joe",
        "mobile": "9876543210",
        "first_name": "Joe",
        "last_name": "Smith",
        "password_hash": "$2b$04$secret-hash",
        "created_at": NOW,
    }
    values.update(changes)
    return User(**values)


def _claims() -> TokenClaims:
    return TokenClaims(
        user_id=_user().id, token_id="jti-1", issued_at=NOW, expires_at=NOW + timedelta(days=7)
    )


@pytest.fixture()
def flask_app() -> Flask:
    app = Flask(__name__)
    configure_error_handling(app)
    return app


def _controller(**overrides) -> AuthController:
    values = {
        "register_use_case": MagicMock(),
        "login_use_case": MagicMock(),
        "profile_use_case": MagicMock(),
        "refresh_use_case": MagicMock(),
        "logout_use_case": MagicMock(),
        "tokens": MagicMock(),
    }
    values.update(overrides)
    return AuthController(**values)


def test_signup_endpoint_returns_created_user(flask_app: Flask) -> None:
    received: dict[str, RegisterUserInput] = {}

    class StubRegister:
        def execute(self, data: RegisterUserInput) -> tuple[User, str]:
            received["data"] = data
            return _user(), "token123"

    controller = _controller(register_use_case=cast(RegisterUserUseCase, StubRegister()))
    flask_app.register_blueprint(controller.as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/auth/signup", json={**VALID_SIGNUP, "isAdmin": True})

    assert response.status_code == 201
    assert received["data"] == RegisterUserInput(
        username="farmer_joe",
        first_name="Joe",
        last_name="Smith",
        mobile="9876543210",
        password="Str0ng!Pass",
    )
    payload = response.get_json()
    assert payload["success"] is True
    assert payload["message"] == "User account created successfully"
    assert payload["data"]["token"] == "token123"
    assert payload["data"]["user"] == {
        "id": "3f0c3c1e-0000-4000-8000-000000000001",
        "username": "farmer_joe",
        "firstName": "Joe",
        "lastName": "Smith",
        "mobile": "9876543210",
        "createdAt": "2025-06-01T12:00:00Z",
        "lastLoginAt": None,
    }
    assert "password" not in response.get_data(as_text=True)


def test_signup_invalid_payload_never_reaches_use_case(flask_app: Flask) -> None:
    register = MagicMock()
    flask_app.register_blueprint(_controller(register_use_case=register).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/auth/signup", json={**VALID_SIGNUP, "username": "x", "mobile": "123"}
        )

    assert response.status_code == 400
    payload = response.get_json()
    assert payload["success"] is False
    assert payload["error"] == "validation_error"
    assert [e["field"] for e in payload["errors"]] == ["username", "mobile"]
    register.execute.assert_not_called()


@pytest.mark.parametrize("body", [None, "not json", [1, 2, 3]])
def test_signup_non_object_body_is_treated_as_empty(flask_app: Flask, body) -> None:
    flask_app.register_blueprint(_controller().as_blueprint())

    with flask_app.test_client() as client:
        if isinstance(body, str):
            response = client.post("/auth/signup", data=body, content_type="text/plain")
        else:
            response = client.post("/auth/signup", json=body)

    assert response.status_code == 400
    assert len(response.get_json()["errors"]) == 5


def test_signup_conflict_maps_to_409(flask_app: Flask) -> None:
    register = MagicMock()
    register.execute.side_effect = UserAlreadyExistsError()
    flask_app.register_blueprint(_controller(register_use_case=register).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/auth/signup", json=VALID_SIGNUP)

    assert response.status_code == 409
    assert response.get_json() == {
        "success": False,
        "error": "user_already_exists",
        "message": "User with this username or mobile number already exists",
    }


def test_login_invalid_credentials_maps_to_401(flask_app: Flask) -> None:
    login = MagicMock()
    login.execute.side_effect = InvalidCredentialsError()
    flask_app.register_blueprint(_controller(login_use_case=login).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/auth/login", json={"username": "farmer_joe", "password": "x"})

    assert response.status_code == 401
    assert response.get_json()["message"] == "Invalid username or password"
    login.execute.assert_called_once_with("farmer_joe", "x")


def test_login_invalid_payload_returns_400(flask_app: Flask) -> None:
    login = MagicMock()
    flask_app.register_blueprint(_controller(login_use_case=login).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/auth/login", json={"username": "a"})

    assert response.status_code == 400
    assert response.get_json()["errors"] == [
        {"field": "username", "message": "Username is required"},
        {"field": "password", "message": "Password is required"},
    ]
    login.execute.assert_not_called()


def test_profile_requires_bearer_token(flask_app: Flask) -> None:
    flask_app.register_blueprint(_controller().as_blueprint())

    with flask_app.test_client() as client:
        missing = client.get("/auth/profile")
        wrong_scheme = client.get("/auth/profile", headers={"Authorization": "Basic abc"})

    for response in (missing, wrong_scheme):
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.get_json()["message"] == "Access token is required"


def test_profile_with_expired_token(flask_app: Flask) -> None:
    tokens = MagicMock()
    tokens.verify.side_effect = TokenExpiredError()
    profile = MagicMock()
    flask_app.register_blueprint(
        _controller(tokens=tokens, profile_use_case=profile).as_blueprint()
    )

    with flask_app.test_client() as client:
        response = client.get("/auth/profile", headers={"Authorization": "Bearer stale"})

    assert response.status_code == 401
    assert response.get_json()["error"] == "token_expired"
    profile.execute.assert_not_called()


def test_profile_returns_user(flask_app: Flask) -> None:
    tokens = MagicMock()
    tokens.verify.return_value = _claims()
    profile = MagicMock()
    profile.execute.return_value = _user(last_login_at=NOW)
    flask_app.register_blueprint(
        _controller(tokens=tokens, profile_use_case=profile).as_blueprint()
    )

    with flask_app.test_client() as client:
        response = client.get("/auth/profile", headers={"Authorization": "Bearer good"})

    assert response.status_code == 200
    tokens.verify.assert_called_once_with("good")
    profile.execute.assert_called_once_with(_user().id)
    assert response.get_json()["data"]["user"]["lastLoginAt"] == "2025-06-01T12:00:00Z"


def test_revoked_token_is_rejected(flask_app: Flask) -> None:
    tokens = MagicMock()
    tokens.verify.return_value = _claims()
    denylist = MagicMock()
    denylist.is_revoked.return_value = True
    flask_app.register_blueprint(_controller(tokens=tokens, denylist=denylist).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/auth/logout", headers={"Authorization": "Bearer good"})

    assert response.status_code == 401
    assert response.get_json()["message"] == "Token has been revoked"
    denylist.is_revoked.assert_called_once_with("jti-1")


def test_refresh_and_logout(flask_app: Flask) -> None:
    tokens = MagicMock()
    tokens.verify.return_value = _claims()
    refresh = MagicMock()
    refresh.execute.return_value = "fresh-token"
    logout = MagicMock()
    logout.execute.return_value = False
    flask_app.register_blueprint(
        _controller(tokens=tokens, refresh_use_case=refresh, logout_use_case=logout).as_blueprint()
    )

    with flask_app.test_client() as client:
        headers = {"Authorization": "Bearer good"}
        refreshed = client.post("/auth/refresh-token", headers=headers)
        logged_out = client.post("/auth/logout", headers=headers)

    assert refreshed.status_code == 200
    assert refreshed.get_json()["data"] == {"token": "fresh-token"}
    assert logged_out.get_json() == {"success": True, "message": "Logout successful"}
    logout.execute.assert_called_once_with(_claims())


def test_health_reports_service(flask_app: Flask) -> None:
    flask_app.register_blueprint(_controller(api_url="https://agri.example").as_blueprint())

    with flask_app.test_client() as client:
        response = client.get("/auth/health")

    payload = response.get_json()
    assert response.status_code == 200
    assert payload["success"] is True
    assert payload["service"] == "agriauth"
    assert payload["apiUrl"] == "https://agri.example"
    assert payload["timestamp"].endswith("Z")
