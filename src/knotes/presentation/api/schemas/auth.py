"""Request and response bodies of the /auth endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Request schema for user registration.

    Email and password rules are enforced by the domain value objects so
    that every violation is reported with the same error format.
    """

    email: str = Field(..., description="Email address, any case")
    password: str = Field(..., description="Password (at least 6 characters)")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "ada@example.com",
                "password": "analytical-engine",
            },
        },
    )


class LoginRequest(BaseModel):
    """Credentials for a password login."""

    email: str
    password: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "ada@example.com",
                "password": "analytical-engine",
            },
        },
    )


class UserResponse(BaseModel):
    """Public view of a user; never includes subject or password hash."""

    id: UUID
    email: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
