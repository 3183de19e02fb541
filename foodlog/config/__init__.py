"""
Config Module - Black Box Interface

Purpose: Application configuration management
Interface: ConfigProvider.get_auth_config(), get_redis_config(), get_api_config()
Hidden: Config sources, environment parsing

Can be replaced with different config systems (secret managers, files).
"""

from .provider import (
    ADMIN_ROLE,
    DEFAULT_TOKEN_TTL_SECONDS,
    APIConfig,
    AuthConfig,
    ConfigProvider,
    EnvConfigProvider,
    RedisConfig,
    StaticConfigProvider,
)

__all__ = [
    "ADMIN_ROLE",
    "DEFAULT_TOKEN_TTL_SECONDS",
    "APIConfig",
    "AuthConfig",
    "ConfigProvider",
    "EnvConfigProvider",
    "RedisConfig",
    "StaticConfigProvider",
]
