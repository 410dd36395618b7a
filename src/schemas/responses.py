from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Uniform error body."""

    error: str = Field(..., description="Error message")


class UploadResponse(BaseModel):
    """Result of an image upload."""

    url: str = Field(..., description="Public URL of the stored image")


class HealthCheckResponse(BaseModel):
    """Health check response schema."""

    success: bool = Field(..., description="Whether every dependency is reachable")
    status: str = Field(..., description="Service status")
    version: str = Field(..., description="API version")
    storage: dict[str, Any] = Field(..., description="Storage backend status")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC), description="Response timestamp")


# Documented on routes that can fail with the uniform error body
ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Invalid input"},
    401: {"model": ErrorResponse, "description": "Missing bearer token"},
    403: {"model": ErrorResponse, "description": "Invalid or expired token"},
    404: {"model": ErrorResponse, "description": "Post not found"},
    500: {"model": ErrorResponse, "description": "Storage failure"},
}
