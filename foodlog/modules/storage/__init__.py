"""
Storage Module - Black Box Interface

Purpose: Persist admin session tokens
Interface: TokenStore.get(), set(), delete(); create_redis_client()
Hidden: Redis specifics, connection setup, serialization

Can be replaced with any key-value backend without affecting the auth module.
"""

import redis.asyncio as redis

from ...config.provider import RedisConfig
from .token_store import (
    InMemoryTokenStore,
    RedisTokenStore,
    TokenRecord,
    TokenStore,
    TokenStoreUnavailable,
)


def create_redis_client(redis_config: RedisConfig) -> redis.Redis:
    """Create an async Redis client from configuration."""
    # Password passed separately to avoid URL encoding issues
    return redis.from_url(
        redis_config.url,
        password=redis_config.password,
        encoding="utf-8",
        decode_responses=True,
    )


__all__ = [
    "InMemoryTokenStore",
    "RedisTokenStore",
    "TokenRecord",
    "TokenStore",
    "TokenStoreUnavailable",
    "create_redis_client",
]
