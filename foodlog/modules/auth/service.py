"""
Authentication Service Facade following Black Box Design principles.

This module provides:
- Standardized login/validate results
- A facade that the HTTP layer talks to, hiding the auth module and
  token transport details (body, Bearer header, X-Admin-Token header)
"""

from dataclasses import dataclass
from typing import Any, Optional

INVALID_PIN_MESSAGE = "Invalid PIN"


@dataclass
class LoginResult:
    """Outcome of a PIN login attempt."""
    ok: bool
    token: Optional[str] = None
    expires_at: Optional[int] = None
    error: Optional[str] = None


@dataclass
class ValidateResult:
    """Outcome of a token check."""
    valid: bool
    role: Optional[str] = None
    expires_at: Optional[int] = None


def extract_token(
    body_token: Optional[str] = None,
    authorization: Optional[str] = None,
    x_admin_token: Optional[str] = None,
) -> str:
    """
    Pick the session token out of a request.

    Precedence: explicit body field, then Authorization: Bearer, then
    the X-Admin-Token header. A blank source is skipped. Returns an empty
    string if none carries a token.
    """
    bearer = None
    if authorization and authorization.startswith("Bearer "):
        bearer = authorization[7:]

    for candidate in (body_token, bearer, x_admin_token):
        token = (candidate or "").strip()
        if token:
            return token

    return ""


class DefaultAuthenticationService:
    """
    Default admin authentication service.

    This facade hides the underlying auth module and provides a stable
    interface for the API layer.
    """

    def __init__(self, auth_module: Any):
        """
        Initialize with any module implementing login/validate/logout.

        Args:
            auth_module: Module satisfying the AuthModule protocol
        """
        self._auth = auth_module

    @property
    def is_enabled(self) -> bool:
        return self._auth.is_enabled

    async def login(self, pin: str) -> LoginResult:
        return await self._auth.login(pin)

    async def validate(self, token: str) -> ValidateResult:
        return await self._auth.validate(token)

    async def logout(self, token: str) -> None:
        await self._auth.logout(token)

    async def authenticate(
        self,
        authorization: Optional[str],
        x_admin_token: Optional[str] = None,
    ) -> ValidateResult:
        """
        Authenticate a request to a protected route.

        Args:
            authorization: Authorization header value
            x_admin_token: X-Admin-Token header value

        Returns:
            ValidateResult for the token carried by the request
        """
        token = extract_token(authorization=authorization, x_admin_token=x_admin_token)
        return await self._auth.validate(token)
