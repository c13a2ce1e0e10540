"""Schemas shared by several endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Body of every non-2xx response raised from the domain."""

    detail: str = Field(..., description="Human-readable message")
    code: str = Field(..., description="Stable ErrorCode value")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"detail": "Not logged in", "code": "NOT_AUTHENTICATED"},
        },
    )


class HealthResponse(BaseModel):
    status: str = Field(..., description="Always 'healthy' when reachable")
    version: str = Field(..., description="API version")
    database: str = Field(..., description="Active storage backend")
