"""
API Module - Black Box Interface

Purpose: HTTP request/response shapes
Interface: Pydantic models for the /auth endpoints
Hidden: Validation rules

The API module only describes the wire format - it contains no business logic.
All logic is delegated to the auth module.
"""

from .models import (
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    TokenRequest,
    ValidateResponse,
)

__all__ = [
    "ErrorResponse",
    "LoginRequest",
    "LoginResponse",
    "LogoutResponse",
    "TokenRequest",
    "ValidateResponse",
]
