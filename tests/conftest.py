"""
Shared pytest fixtures for foodlog tests.

This module provides common fixtures including:
- A controllable clock for expiry tests
- Redis mocks for token store tests
- In-memory token store, auth service and FastAPI app/client
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from foodlog.app import create_app
from foodlog.config.provider import AuthConfig, StaticConfigProvider
from foodlog.modules.auth import AdminAuthModule, DefaultAuthenticationService
from foodlog.modules.storage import InMemoryTokenStore

ADMIN_PIN = "4242"
ONE_DAY = 24 * 60 * 60
START_TIME = 1_700_000_000


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: float = START_TIME):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_store(clock):
    return InMemoryTokenStore(clock=clock)


@pytest.fixture
def auth_config():
    return AuthConfig(admin_pin=ADMIN_PIN, token_ttl_seconds=ONE_DAY)


@pytest.fixture
def auth_module(auth_config, memory_store, clock):
    return AdminAuthModule(auth_config, memory_store, clock=clock)


@pytest.fixture
def auth_service(auth_module):
    return DefaultAuthenticationService(auth_module)


@pytest.fixture
def config_provider(auth_config):
    return StaticConfigProvider(auth_config=auth_config)


@pytest.fixture
def app(config_provider, memory_store, clock):
    return create_app(config_provider, token_store=memory_store, clock=clock)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


# =============================================================================
# Redis Mocking Infrastructure
# =============================================================================

@pytest.fixture
def mock_redis():
    """Create a mock Redis client for async operations."""
    redis = AsyncMock()
    redis.setex = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock()
    redis.delete = AsyncMock(return_value=1)
    redis.ping = AsyncMock(return_value=True)
    return redis


@pytest.fixture
def mock_redis_with_data():
    """
    Redis mock with in-memory data storage for more realistic tests.

    This allows testing code that reads back what it writes.
    """
    storage = {}
    ttls = {}

    redis = AsyncMock()

    async def mock_set(key, value, *args, **kwargs):
        storage[key] = value
        return True

    async def mock_setex(key, ttl, value):
        storage[key] = value
        ttls[key] = ttl
        return True

    async def mock_get(key):
        return storage.get(key)

    async def mock_delete(*keys):
        count = 0
        for key in keys:
            if key in storage:
                del storage[key]
                ttls.pop(key, None)
                count += 1
        return count

    redis.set = mock_set
    redis.setex = mock_setex
    redis.get = mock_get
    redis.delete = mock_delete
    redis.ping = AsyncMock(return_value=True)
    redis._storage = storage  # Expose for test assertions
    redis._ttls = ttls

    return redis


# =============================================================================
# Test Markers Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: Tests wiring several modules together"
    )
