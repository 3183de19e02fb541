"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

# Session lifetime for admin tokens: 12 hours
DEFAULT_TOKEN_TTL_SECONDS = 12 * 60 * 60
ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class AuthConfig:
    """
    Admin authentication configuration.

    Built once at startup and handed to the auth module; never mutated.
    """
    admin_pin: str = field(default="", repr=False)
    token_ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS
    role: str = ADMIN_ROLE

    @property
    def is_configured(self) -> bool:
        """Check if an admin PIN is set at all."""
        return bool(self.admin_pin)


@dataclass(frozen=True)
class RedisConfig:
    """Token store connection configuration."""
    host: str
    port: int
    db: int
    password: Optional[str] = field(default=None, repr=False)
    key_prefix: str = "token:"

    @property
    def url(self) -> str:
        """Connection URL without the password."""
        return f"redis://{self.host}:{self.port}/{self.db}"


@dataclass
class APIConfig:
    """API configuration."""
    port: int
    host: str
    debug: bool
    log_level: str
    cors_origins: List[str]
    token_store: str


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_auth_config(self) -> AuthConfig:
        """Get authentication configuration."""
        ...

    def get_redis_config(self) -> RedisConfig:
        """Get token store configuration."""
        ...

    def get_api_config(self) -> APIConfig:
        """Get API configuration."""
        ...


def _parse_port(value: str) -> int:
    # K8s service links inject REDIS_PORT as tcp://host:port
    if value.startswith("tcp://"):
        return int(value.split(":")[-1])
    return int(value)


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_auth_config(self) -> AuthConfig:
        """
        Get authentication configuration from environment variables.

        A missing ADMIN_PIN is not an error: admin login stays disabled
        while the rest of the site keeps working.
        """
        ttl = int(os.getenv("ADMIN_TOKEN_TTL_SECONDS", str(DEFAULT_TOKEN_TTL_SECONDS)))
        if ttl <= 0:
            raise ValueError("ADMIN_TOKEN_TTL_SECONDS must be a positive number of seconds")

        return AuthConfig(
            admin_pin=os.getenv("ADMIN_PIN", "").strip(),
            token_ttl_seconds=ttl,
        )

    def get_redis_config(self) -> RedisConfig:
        """Get Redis configuration from environment variables."""
        return RedisConfig(
            host=os.getenv("REDIS_HOST", "localhost"),
            port=_parse_port(os.getenv("REDIS_PORT", "6379")),
            db=int(os.getenv("REDIS_DB", "0")),
            password=os.getenv("REDIS_PASSWORD") or None,
            key_prefix=os.getenv("REDIS_KEY_PREFIX", "token:"),
        )

    def get_api_config(self) -> APIConfig:
        """Get API configuration from environment variables."""
        token_store = os.getenv("TOKEN_STORE", "redis").lower()
        if token_store not in ("redis", "memory"):
            raise ValueError(f"Unsupported TOKEN_STORE '{token_store}' (expected redis or memory)")

        return APIConfig(
            port=int(os.getenv("API_PORT", "8080")),
            host=os.getenv("API_HOST", "0.0.0.0"),
            debug=os.getenv("API_DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            cors_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()],
            token_store=token_store,
        )


class StaticConfigProvider:
    """Configuration provider holding fixed values, used in tests and embedding."""

    def __init__(
        self,
        auth_config: Optional[AuthConfig] = None,
        redis_config: Optional[RedisConfig] = None,
        api_config: Optional[APIConfig] = None,
    ):
        self._auth = auth_config or AuthConfig()
        self._redis = redis_config or RedisConfig(host="localhost", port=6379, db=0)
        self._api = api_config or APIConfig(
            port=8080,
            host="127.0.0.1",
            debug=False,
            log_level="INFO",
            cors_origins=["*"],
            token_store="memory",
        )

    def get_auth_config(self) -> AuthConfig:
        return self._auth

    def get_redis_config(self) -> RedisConfig:
        return self._redis

    def get_api_config(self) -> APIConfig:
        return self._api
