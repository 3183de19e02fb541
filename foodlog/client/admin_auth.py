"""
Client-side admin authentication state.

Talks to the /auth endpoints and keeps the issued token in local
persistent storage so a returning session is validated without asking
for the PIN again. The cached token is advisory; the server decides.
"""

import logging
import re
import time
from typing import Callable, Dict, Optional

import httpx

from .storage import LocalStorage

logger = logging.getLogger("foodlog.client")

AUTH_STORAGE_KEY = "admin_auth_token"

PIN_FORMAT_MESSAGE = "Please enter a 4-digit PIN"
INVALID_PIN_MESSAGE = "Invalid PIN"
SESSION_EXPIRED_MESSAGE = "Session expired, please log in again"
SERVICE_UNAVAILABLE_MESSAGE = "Service unavailable, please try again"

_PIN_PATTERN = re.compile(r"^[0-9]{4}$")


class AdminAuth:
    """
    Admin unlock state for one client.

    Attributes:
        is_authenticated: Whether admin features should be shown
        token: Current session token, if any
        expires_at: Expiry of the current token (Unix seconds)
        error_message: Last user-facing error, cleared on each attempt
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        storage: Optional[LocalStorage] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize client auth state.

        Args:
            http_client: Client whose base_url points at the foodlog API
            storage: Persistent storage for the cached token
            clock: Callable returning the current Unix time in seconds
        """
        self.http = http_client
        self.storage = storage or LocalStorage()
        self.clock = clock

        self.is_authenticated = False
        self.token: Optional[str] = None
        self.expires_at: Optional[int] = None
        self.error_message: Optional[str] = None

    def _clear(self) -> None:
        self.is_authenticated = False
        self.token = None
        self.expires_at = None
        self.storage.delete(AUTH_STORAGE_KEY)

    async def init(self) -> None:
        """Load a cached token and confirm it with the server."""
        stored = self.storage.get(AUTH_STORAGE_KEY)
        if not isinstance(stored, dict) or not stored.get("token"):
            return

        expires_at = stored.get("expires_at")
        if (
            isinstance(expires_at, bool)
            or not isinstance(expires_at, (int, float))
            or expires_at <= self.clock()
        ):
            self.storage.delete(AUTH_STORAGE_KEY)
            return

        self.token = stored["token"]
        self.expires_at = expires_at
        await self.validate_token(self.token)

    async def validate_token(self, token: str) -> None:
        """Ask the server whether token is still active and update state."""
        try:
            response = await self.http.post("/auth/validate", json={"token": token})
            response.raise_for_status()
        except httpx.HTTPError as e:
            # Keep the cached token; the store may just be briefly down
            logger.error(f"Failed to validate token: {e}")
            self.error_message = SERVICE_UNAVAILABLE_MESSAGE
            return

        result = response.json()
        if result.get("valid"):
            self.is_authenticated = True
            self.token = token
            self.expires_at = result.get("expires_at", self.expires_at)
        else:
            self._clear()
            self.error_message = SESSION_EXPIRED_MESSAGE

    async def login(self, pin: str) -> bool:
        """
        Attempt login with a PIN.

        Returns:
            True if a token was issued and cached
        """
        self.error_message = None

        if not _PIN_PATTERN.match(pin or ""):
            self.error_message = PIN_FORMAT_MESSAGE
            return False

        try:
            response = await self.http.post("/auth/login", json={"pin": pin})
        except httpx.HTTPError as e:
            logger.error(f"Login request failed: {e}")
            self.error_message = SERVICE_UNAVAILABLE_MESSAGE
            return False

        if response.status_code == 401:
            self.error_message = INVALID_PIN_MESSAGE
            return False
        if response.is_error:
            logger.error(f"Login failed with status {response.status_code}")
            self.error_message = SERVICE_UNAVAILABLE_MESSAGE
            return False

        result = response.json()
        self.storage.set(
            AUTH_STORAGE_KEY,
            {"token": result["token"], "expires_at": result["expires_at"]},
        )
        self.token = result["token"]
        self.expires_at = result["expires_at"]
        self.is_authenticated = True
        return True

    async def logout(self) -> None:
        """Revoke the token on the server and clear local state regardless."""
        if self.token:
            try:
                response = await self.http.post("/auth/logout", json={"token": self.token})
                response.raise_for_status()
            except httpx.HTTPError as e:
                logger.error(f"Logout request failed: {e}")

        self._clear()

    def auth_headers(self) -> Dict[str, str]:
        """Headers for calling admin-only endpoints."""
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}
