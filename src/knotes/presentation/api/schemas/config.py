"""Public client configuration schema."""

from pydantic import BaseModel, Field


class ConfigResponse(BaseModel):
    """Settings a frontend needs before the user logs in."""

    allow_registration: bool = Field(
        ...,
        description="Whether self-service registration is open",
    )
