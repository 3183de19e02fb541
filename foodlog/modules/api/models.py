"""
foodlog auth API data models.

These models define the request and response bodies of the
/auth/* endpoints.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr

# Request Models (API Input)


class LoginRequest(BaseModel):
    """Request to exchange the admin PIN for a session token."""

    # Any string is accepted; the comparison decides
    pin: SecretStr = Field(..., description="Admin PIN")


class TokenRequest(BaseModel):
    """Body of validate/logout requests. The token may come from a header instead."""

    token: Optional[str] = Field(None, description="Session token")


# Response Models (API Output)


class LoginResponse(BaseModel):
    """Issued session token."""

    token: str = Field(..., description="Opaque bearer token for admin requests")
    expires_at: int = Field(..., description="Expiry as Unix time in seconds")


class ValidateResponse(BaseModel):
    """Result of a token check."""

    model_config = ConfigDict(json_schema_extra={"examples": [{"valid": True, "role": "admin", "expires_at": 1767225600}]})

    valid: bool
    role: Optional[str] = None
    expires_at: Optional[int] = None


class LogoutResponse(BaseModel):
    """Logout acknowledgement; always empty."""


class ErrorResponse(BaseModel):
    """Error body returned by exception handlers."""

    error: str
