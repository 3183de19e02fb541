"""
Token store implementations for admin session tokens.

The auth module only sees the TokenStore protocol (get/set/delete).
Two implementations live here:
- RedisTokenStore: the managed key-value service used in deployment
- InMemoryTokenStore: same semantics in-process, for tests and local runs

Keys are passed in by the caller (e.g. "token:<hex>"); values are
TokenRecord instances serialized as JSON.
"""

import json
import logging
import time
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

import redis.asyncio as redis

logger = logging.getLogger("foodlog.storage")


class TokenStoreUnavailable(Exception):
    """Raised when the backing key-value service cannot be reached."""


@dataclass(frozen=True)
class TokenRecord:
    """Authoritative record for one issued session token."""

    role: str
    issued_at: int
    expires_at: int

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenRecord":
        """Create from dictionary (e.g., from JSON)."""
        return cls(
            role=str(data["role"]),
            issued_at=int(data["issued_at"]),
            expires_at=int(data["expires_at"]),
        )


class TokenStore(Protocol):
    """Capability interface consumed by the auth module."""

    async def get(self, key: str) -> Optional[TokenRecord]:
        ...

    async def set(self, key: str, value: TokenRecord, ttl: Optional[int] = None) -> None:
        ...

    async def delete(self, key: str) -> None:
        ...

    async def ping(self) -> bool:
        ...


def _decode(raw: Any) -> Optional[TokenRecord]:
    """Parse a stored value; unreadable values count as absent."""
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    try:
        return TokenRecord.from_dict(json.loads(raw))
    except (ValueError, KeyError, TypeError):
        logger.warning("Discarding unreadable token record")
        return None


class RedisTokenStore:
    """
    Token store backed by Redis.

    Expiry is enforced twice: Redis drops the key after its TTL, and the
    auth module compares expires_at on every read.
    """

    def __init__(self, redis_client):
        """
        Initialize token store.

        Args:
            redis_client: Async Redis client created at startup
        """
        self.redis = redis_client

    async def get(self, key: str) -> Optional[TokenRecord]:
        try:
            raw = await self.redis.get(key)
        except redis.RedisError as e:
            logger.error(f"Redis error reading token: {e}")
            raise TokenStoreUnavailable(str(e)) from e

        if raw is None:
            return None
        return _decode(raw)

    async def set(self, key: str, value: TokenRecord, ttl: Optional[int] = None) -> None:
        payload = json.dumps(value.to_dict())
        try:
            if ttl:
                await self.redis.setex(key, ttl, payload)
            else:
                await self.redis.set(key, payload)
        except redis.RedisError as e:
            logger.error(f"Redis error storing token: {e}")
            raise TokenStoreUnavailable(str(e)) from e

    async def delete(self, key: str) -> None:
        try:
            await self.redis.delete(key)
        except redis.RedisError as e:
            logger.error(f"Redis error deleting token: {e}")
            raise TokenStoreUnavailable(str(e)) from e

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except redis.RedisError as e:
            raise TokenStoreUnavailable(str(e)) from e


class InMemoryTokenStore:
    """
    Dictionary-backed token store with TTL support.

    Runs on a single event loop, so single-key operations are atomic
    without locking.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        # key -> (record, deadline or None)
        self._data: Dict[str, Tuple[TokenRecord, Optional[float]]] = {}

    async def get(self, key: str) -> Optional[TokenRecord]:
        entry = self._data.get(key)
        if entry is None:
            return None

        record, deadline = entry
        if deadline is not None and self._clock() >= deadline:
            del self._data[key]
            return None
        return record

    async def set(self, key: str, value: TokenRecord, ttl: Optional[int] = None) -> None:
        deadline = self._clock() + ttl if ttl else None
        self._data[key] = (value, deadline)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def ping(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: str) -> bool:
        return key in self._data
