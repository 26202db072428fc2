import os
from dataclasses import dataclass
from functools import lru_cache

import redis
from dotenv import load_dotenv

load_dotenv()

CACHE_BACKENDS = ("memory", "redis")


def _optional_float(value: str | None) -> float | None:
    if value is None or value.strip() == "":
        return None
    return float(value)


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Cache partitions
    cache_version: str = os.getenv("CACHE_VERSION", "v1.0.0")
    cache_backend: str = os.getenv("CACHE_BACKEND", "memory")
    cache_key_prefix: str = os.getenv("CACHE_KEY_PREFIX", "offline_cache")
    app_name: str = os.getenv("APP_NAME", "doctorfix")

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # Network
    origin_url: str = os.getenv("ORIGIN_URL", "http://localhost:5173")
    # None means no timeout: a hung fetch stays pending like in the browser
    network_timeout: float | None = _optional_float(os.getenv("NETWORK_TIMEOUT"))

    # Background sync
    sync_tag: str = os.getenv("SYNC_TAG", "contact-form-sync")
    contact_path: str = os.getenv("CONTACT_PATH", "/api/contact")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str | None = os.getenv("LOG_FILE")

    @property
    def static_cache_name(self) -> str:
        """Name of the partition holding pre-cached static assets."""
        return f"static-{self.cache_version}"

    @property
    def dynamic_cache_name(self) -> str:
        """Name of the partition filled on demand (and used as sync outbox)."""
        return f"dynamic-{self.cache_version}"

    @property
    def version_tag(self) -> str:
        """Version tag identifying the worker build, e.g. ``doctorfix-v1.0.0``."""
        return f"{self.app_name}-{self.cache_version}"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_backend not in CACHE_BACKENDS:
            raise ValueError(
                f"CACHE_BACKEND must be one of {list(CACHE_BACKENDS)}, got {self.cache_backend!r}"
            )

        if self.network_timeout is not None and self.network_timeout <= 0:
            raise ValueError("NETWORK_TIMEOUT must be a positive number of seconds")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create a Redis client instance."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=False,
    )
