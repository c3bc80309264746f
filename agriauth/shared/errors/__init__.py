from .base import (
    AppError,
    DomainError,
    FieldError,
    InfrastructureError,
    RateLimitedError,
    StorageError,
    ValidationError,
)
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "DomainError",
    "FieldError",
    "InfrastructureError",
    "RateLimitedError",
    "StorageError",
    "ValidationError",
    "handle_app_error",
    "register_error_handler",
]
