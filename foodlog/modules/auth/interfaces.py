"""Authentication interfaces following Black Box Design principles."""
from typing import Callable, Protocol

from .service import LoginResult, ValidateResult

# Returns the current Unix time in seconds
Clock = Callable[[], float]


class AuthModule(Protocol):
    """Protocol for admin authentication modules."""

    @property
    def is_enabled(self) -> bool:
        """Whether an admin PIN is configured."""
        ...

    async def login(self, pin: str) -> LoginResult:
        """
        Exchange a PIN for a new session token.

        Returns:
            LoginResult with ok=False for a wrong or unconfigured PIN
        """
        ...

    async def validate(self, token: str) -> ValidateResult:
        """
        Check whether a session token is still active.

        Returns:
            ValidateResult with valid=False for unknown or expired tokens
        """
        ...

    async def logout(self, token: str) -> None:
        """Revoke a session token. Idempotent."""
        ...
