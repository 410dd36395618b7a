from typing import Literal

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Login payload."""

    # Keep schema permissive; the service reports missing values as a 400
    username: str | None = Field(None, description="Admin username")
    password: str | None = Field(None, description="Admin password")


class TokenPayload(BaseModel):
    """Access token response payload."""

    token: str = Field(..., description="Signed bearer token")
    token_type: Literal["bearer"] = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., ge=1, description="Token TTL in seconds")
