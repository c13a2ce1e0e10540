"""Pydantic schemas for API request/response models."""

from knotes.presentation.api.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    UserResponse,
)
from knotes.presentation.api.schemas.common import ErrorResponse, HealthResponse
from knotes.presentation.api.schemas.config import ConfigResponse

__all__ = [
    "ConfigResponse",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "RegisterRequest",
    "UserResponse",
]
