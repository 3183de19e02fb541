"""
Authentication Factory following Black Box Design principles.

This factory:
- Constructs the authentication stack based on configuration
- Wires dependencies together
- Returns only the service facade (hiding implementation)
"""

import logging
import time
from typing import Optional

from ...config.provider import AuthConfig, ConfigProvider
from ..storage import InMemoryTokenStore, TokenStore
from .auth import AdminAuthModule
from .interfaces import AuthModule, Clock
from .service import DefaultAuthenticationService

logger = logging.getLogger(__name__)


class AuthFactory:
    """
    Factory for building the authentication stack.

    This is the composition root that:
    - Creates all auth components
    - Wires them together via dependency injection
    - Returns only the public interface
    """

    @staticmethod
    def build(
        config_provider: ConfigProvider,
        token_store: TokenStore,
        clock: Clock = time.time,
    ) -> DefaultAuthenticationService:
        """
        Build the complete authentication stack.

        Args:
            config_provider: Configuration provider
            token_store: Store for issued session tokens
            clock: Time source, injectable for tests

        Returns:
            DefaultAuthenticationService facade
        """
        auth_config = config_provider.get_auth_config()
        redis_config = config_provider.get_redis_config()

        if auth_config.is_configured:
            logger.info(
                f"Admin login enabled (token lifetime {auth_config.token_ttl_seconds}s)"
            )
        else:
            logger.warning("ADMIN_PIN not set; admin features are disabled")

        auth_module: AuthModule = AdminAuthModule(
            auth_config,
            token_store,
            clock=clock,
            key_prefix=redis_config.key_prefix,
        )
        return DefaultAuthenticationService(auth_module)

    @staticmethod
    def build_for_testing(
        admin_pin: str = "",
        token_ttl_seconds: int = 3600,
        token_store: Optional[TokenStore] = None,
        clock: Clock = time.time,
    ) -> DefaultAuthenticationService:
        """
        Build auth stack for testing with an in-memory store.

        Args:
            admin_pin: PIN to configure
            token_ttl_seconds: Session lifetime
            token_store: Store to use; a fresh InMemoryTokenStore by default
            clock: Time source shared by module and store

        Returns:
            DefaultAuthenticationService for testing
        """
        config = AuthConfig(admin_pin=admin_pin, token_ttl_seconds=token_ttl_seconds)
        store = token_store if token_store is not None else InMemoryTokenStore(clock=clock)
        return DefaultAuthenticationService(AdminAuthModule(config, store, clock=clock))
