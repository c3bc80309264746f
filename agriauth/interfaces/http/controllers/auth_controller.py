# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime
from http import HTTPStatus
from typing import Any, TypeVar

from flask import Blueprint, Response, g, jsonify, request
from pydantic import BaseModel, ValidationError

from agriauth.application.use_cases.users.get_profile import GetProfileUseCase
from agriauth.application.use_cases.users.login_user import LoginUserUseCase
from agriauth.application.use_cases.users.logout_user import LogoutUserUseCase
from agriauth.application.use_cases.users.refresh_token import RefreshTokenUseCase
from agriauth.application.use_cases.users.register_user import (
    RegisterUserInput,
    RegisterUserUseCase,
)
from agriauth.domain.users.entities import TokenClaims
from agriauth.domain.users.exceptions import (
    InvalidCredentialsError,
    TokenInvalidError,
    UnauthorizedError,
)
from agriauth.domain.users.repositories import TokenDenylist, TokenService
from agriauth.infrastructure.audit import AuditAction, audit_log
from agriauth.interfaces.http.dto.auth import (
    FIELD_LABELS,
    LoginRequestDTO,
    SignupRequestDTO,
    UserDTO,
)
from agriauth.shared.errors.validation import raise_validation_error
from agriauth.shared.logging import logger
from agriauth.shared.middleware.client_address import client_address
from agriauth.shared.middleware.rate_limit import EndpointClass, rate_limit
from agriauth.shared.middleware.sanitize import sanitize_input, sanitized_body

DTO = TypeVar("DTO", bound=BaseModel)


def _bearer_token() -> str:
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


def _parse(dto_cls: type[DTO]) -> DTO:
    body = sanitized_body()
    if not isinstance(body, dict):
        body = {}
    try:
        return dto_cls.model_validate(body)
    except ValidationError as exc:
        raise_validation_error(exc, FIELD_LABELS)


def _respond(
    message: str, data: dict[str, Any] | None = None, status: HTTPStatus = HTTPStatus.OK
) -> tuple[Response, HTTPStatus]:
    payload: dict[str, Any] = {"success": True, "message": message}
    if data is not None:
        payload["data"] = data
    return jsonify(payload), status


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        profile_use_case: GetProfileUseCase,
        refresh_use_case: RefreshTokenUseCase,
        logout_use_case: LogoutUserUseCase,
        tokens: TokenService,
        denylist: TokenDenylist | None = None,
        url_prefix: str = "/auth",
        api_url: str | None = None,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._profile_use_case = profile_use_case
        self._refresh_use_case = refresh_use_case
        self._logout_use_case = logout_use_case
        self._tokens = tokens
        self._denylist = denylist
        self._url_prefix = url_prefix
        self._api_url = api_url

    def _authenticate(self) -> TokenClaims:
        token = _bearer_token()
        if not token:
            logger.warning(
                f"No bearer token on {request.method} {request.path} from {client_address()}"
            )
            raise UnauthorizedError(message="Access token is required")
        try:
            claims = self._tokens.verify(token)
        except UnauthorizedError as exc:
            logger.warning(f"Auth failed ({exc.code}) on {request.method} {request.path}")
            raise
        if self._denylist is not None and self._denylist.is_revoked(claims.token_id):
            logger.warning(f"Auth failed (revoked) on {request.method} {request.path}")
            raise TokenInvalidError(message="Token has been revoked")
        g.user_id = claims.user_id
        return claims

    @rate_limit(EndpointClass.AUTH)
    @sanitize_input
    def signup(self) -> tuple[Response, HTTPStatus]:
        dto = _parse(SignupRequestDTO)

        user, token = self._register_use_case.execute(
            RegisterUserInput(
                username=dto.username,
                first_name=dto.first_name,
                last_name=dto.last_name,
                mobile=dto.mobile,
                password=dto.password,
            )
        )

        audit_log(
            AuditAction.SIGNUP,
            user_id=user.id,
            ip_address=client_address(),
            details={"username": dto.username},
        )
        return _respond(
            "User account created successfully",
            {"user": UserDTO.from_domain(user).to_payload(), "token": token},
            HTTPStatus.CREATED,
        )

    @rate_limit(EndpointClass.AUTH)
    @sanitize_input
    def login(self) -> tuple[Response, HTTPStatus]:
        dto = _parse(LoginRequestDTO)
        ip_address = client_address()

        try:
            user, token = self._login_use_case.execute(dto.username, dto.password)
        except InvalidCredentialsError:
            audit_log(
                AuditAction.LOGIN_FAILED,
                ip_address=ip_address,
                details={"username": dto.username},
                success=False,
            )
            raise

        audit_log(
            AuditAction.LOGIN_SUCCESS,
            user_id=user.id,
            ip_address=ip_address,
            details={"username": dto.username},
        )
        return _respond(
            "Login successful",
            {"user": UserDTO.from_domain(user).to_payload(), "token": token},
        )

    @rate_limit(EndpointClass.GENERAL)
    def profile(self) -> tuple[Response, HTTPStatus]:
        claims = self._authenticate()
        user = self._profile_use_case.execute(claims.user_id)
        return _respond(
            "Profile retrieved successfully",
            {"user": UserDTO.from_domain(user).to_payload()},
        )

    @rate_limit(EndpointClass.GENERAL)
    def refresh_token(self) -> tuple[Response, HTTPStatus]:
        claims = self._authenticate()
        token = self._refresh_use_case.execute(claims.user_id)
        audit_log(AuditAction.TOKEN_REFRESHED, user_id=claims.user_id, ip_address=client_address())
        return _respond("Token refreshed successfully", {"token": token})

    @rate_limit(EndpointClass.GENERAL)
    def logout(self) -> tuple[Response, HTTPStatus]:
        claims = self._authenticate()
        revoked = self._logout_use_case.execute(claims)
        audit_log(
            AuditAction.LOGOUT,
            user_id=claims.user_id,
            ip_address=client_address(),
            details={"revoked": revoked},
        )
        return _respond("Logout successful")

    def health(self) -> tuple[Response, HTTPStatus]:
        payload = {
            "success": True,
            "message": "Auth service is healthy",
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "service": "agriauth",
        }
        if self._api_url:
            payload["apiUrl"] = self._api_url
        return jsonify(payload), HTTPStatus.OK

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix=self._url_prefix)
        bp.add_url_rule("/signup", view_func=self.signup, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/profile", view_func=self.profile, methods=["GET"])
        bp.add_url_rule("/refresh-token", view_func=self.refresh_token, methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["POST"])
        bp.add_url_rule("/health", view_func=self.health, methods=["GET"])
        return bp
