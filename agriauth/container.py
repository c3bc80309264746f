"""Application dependency container."""

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from agriauth.application.services.password_hashing import BcryptPasswordHasher
from agriauth.application.services.tokens import JwtTokenService
from agriauth.application.use_cases.users.get_profile import GetProfileUseCase
from agriauth.application.use_cases.users.login_user import LoginUserUseCase
from agriauth.application.use_cases.users.logout_user import LogoutUserUseCase
from agriauth.application.use_cases.users.refresh_token import RefreshTokenUseCase
from agriauth.application.use_cases.users.register_user import RegisterUserUseCase
from agriauth.infrastructure.auth.token_denylist import InMemoryTokenDenylist
from agriauth.infrastructure.db import Database
from agriauth.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from agriauth.interfaces.http.controllers.auth_controller import AuthController
from agriauth.shared.config import AppConfig, load_config
from agriauth.shared.middleware.rate_limit import EndpointClass, RateLimiter


class Container:
    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or load_config()

    @cached_property
    def database(self) -> Database:
        return Database(self.config.database)

    @cached_property
    def password_hasher(self) -> BcryptPasswordHasher:
        return BcryptPasswordHasher(rounds=self.config.bcrypt_rounds)

    @cached_property
    def token_service(self) -> JwtTokenService:
        return JwtTokenService(
            self.config.jwt_secret,
            ttl=timedelta(seconds=self.config.jwt_expires_in),
            algorithm=self.config.jwt_algorithm,
        )

    @cached_property
    def token_denylist(self) -> InMemoryTokenDenylist | None:
        if not self.config.token_revocation_enabled:
            return None
        return InMemoryTokenDenylist()

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.database)

    @cached_property
    def rate_limiters(self) -> dict[EndpointClass, RateLimiter] | None:
        security = self.config.security
        if not security.enable_rate_limit:
            return None
        return {
            EndpointClass.AUTH: RateLimiter(security.auth_rate_limit, security.rate_limit_window),
            EndpointClass.GENERAL: RateLimiter(
                security.general_rate_limit, security.rate_limit_window
            ),
        }

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def get_profile_use_case(self) -> GetProfileUseCase:
        return GetProfileUseCase(users=self.user_repository)

    @cached_property
    def refresh_token_use_case(self) -> RefreshTokenUseCase:
        return RefreshTokenUseCase(tokens=self.token_service)

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(denylist=self.token_denylist)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            profile_use_case=self.get_profile_use_case,
            refresh_use_case=self.refresh_token_use_case,
            logout_use_case=self.logout_user_use_case,
            tokens=self.token_service,
            denylist=self.token_denylist,
            url_prefix=f"{self.config.api_prefix}/auth",
            api_url=self.config.api_url,
        )
