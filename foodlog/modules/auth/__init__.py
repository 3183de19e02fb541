"""
Authentication Module - Black Box Interface

Purpose: Gate admin features behind a PIN
Interface: login(), validate(), logout()
Hidden: Token format, token storage, PIN comparison

This module can be completely replaced with any other auth implementation
(OAuth, JWT, external service) without affecting other modules.
"""

from .auth import AdminAuthModule
from .factory import AuthFactory
from .service import DefaultAuthenticationService, LoginResult, ValidateResult, extract_token

__all__ = [
    "AdminAuthModule",
    "AuthFactory",
    "DefaultAuthenticationService",
    "LoginResult",
    "ValidateResult",
    "extract_token",
]
