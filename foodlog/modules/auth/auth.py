"""
Admin authentication module for the foodlog API.

This module handles PIN login, session token validation and logout.
It's designed as a black box that can be replaced with any auth system
without affecting other modules.
"""

import logging
import secrets
import time
from typing import Optional

from ...config.provider import AuthConfig
from ..storage import TokenRecord, TokenStore, TokenStoreUnavailable
from .interfaces import Clock
from .service import INVALID_PIN_MESSAGE, LoginResult, ValidateResult

logger = logging.getLogger("foodlog.auth")

# Attempts at drawing a token that is not already in the store
MAX_TOKEN_ATTEMPTS = 3

# Compared against when ADMIN_PIN is unset
_UNSET_PIN = b"\x00" * 4


class AdminAuthModule:
    """
    PIN-based admin authentication.

    Holds the immutable auth configuration and a handle to the token
    store. All consistency is delegated to the store's single-key
    operations, so no locking happens here.
    """

    @staticmethod
    def generate_token() -> str:
        """Generate a cryptographically secure token (32 bytes, hex encoded)."""
        return secrets.token_hex(32)

    def __init__(
        self,
        config: AuthConfig,
        token_store: TokenStore,
        clock: Clock = time.time,
        key_prefix: str = "token:",
    ):
        """
        Initialize auth module.

        Args:
            config: Admin PIN and session lifetime
            token_store: Store holding issued tokens
            clock: Callable returning the current Unix time in seconds
            key_prefix: Namespace for token keys in the store
        """
        self.config = config
        self.store = token_store
        self.clock = clock
        self.key_prefix = key_prefix

    @property
    def is_enabled(self) -> bool:
        return self.config.is_configured

    def _key(self, token: str) -> str:
        """Generate store key for a token."""
        return f"{self.key_prefix}{token}"

    def _now(self) -> int:
        return int(self.clock())

    def _pin_matches(self, pin: str) -> bool:
        """Compare against the configured PIN in constant time."""
        submitted = (pin or "").encode("utf-8")
        if not self.config.is_configured:
            logger.warning("ADMIN_PIN not configured; admin login is disabled")
            # Same comparison work as a configured PIN, result discarded
            secrets.compare_digest(submitted, _UNSET_PIN)
            return False
        return secrets.compare_digest(submitted, self.config.admin_pin.encode("utf-8"))

    async def _fresh_token(self) -> str:
        for _ in range(MAX_TOKEN_ATTEMPTS):
            token = self.generate_token()
            if await self.store.get(self._key(token)) is None:
                return token
        raise RuntimeError("Could not generate an unused session token")

    async def login(self, pin: str) -> LoginResult:
        """
        Authenticate with the admin PIN.

        Args:
            pin: PIN submitted by the user

        Returns:
            LoginResult carrying the new token on success
        """
        if not self._pin_matches(pin):
            logger.info("Admin login rejected")
            return LoginResult(ok=False, error=INVALID_PIN_MESSAGE)

        token = await self._fresh_token()
        now = self._now()
        ttl = self.config.token_ttl_seconds
        record = TokenRecord(role=self.config.role, issued_at=now, expires_at=now + ttl)

        await self.store.set(self._key(token), record, ttl=ttl)

        logger.info(f"Admin login successful, token {token[:8]}... issued")
        return LoginResult(ok=True, token=token, expires_at=record.expires_at)

    async def validate(self, token: Optional[str]) -> ValidateResult:
        """
        Validate a session token.

        Args:
            token: Token previously returned by login

        Returns:
            ValidateResult, valid only for a stored and unexpired token
        """
        if not token:
            return ValidateResult(valid=False)

        key = self._key(token)
        record = await self.store.get(key)
        if record is None:
            return ValidateResult(valid=False)

        if record.is_expired(self._now()):
            try:
                await self.store.delete(key)
            except TokenStoreUnavailable as e:
                logger.warning(f"Could not remove expired token: {e}")
            return ValidateResult(valid=False)

        return ValidateResult(valid=True, role=record.role, expires_at=record.expires_at)

    async def logout(self, token: Optional[str]) -> None:
        """
        Revoke a session token.

        Args:
            token: Token to revoke; unknown or expired tokens are ignored
        """
        if not token:
            return

        await self.store.delete(self._key(token))
        logger.info(f"Admin token {token[:8]}... revoked")
