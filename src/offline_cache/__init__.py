"""Offline Cache - offline-first request caching for the Doctor Fix site.

This package provides a layered architecture for intercepting site requests:

Layers:
    - protocols: Interface contracts (CacheStorage, CacheStore, Fetcher)
    - repositories: Cache backends (memory, Redis) and the httpx network fetcher
    - services: Routing table, strategies, lifecycle, background sync, push
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from offline_cache.services import OfflineCacheService

    worker = OfflineCacheService.create()
    await worker.start()
    outcome = await worker.handle_fetch(CachedRequest.get("http://localhost:5173/"))
    ```

For HTTP API:
    ```python
    from offline_cache.api.app import app
    ```
"""

from offline_cache.config import get_redis_client, settings
from offline_cache.entities import CachedRequest, CachedResponse
from offline_cache.exceptions import (
    CacheStorageError,
    InstallError,
    InvalidPushPayloadError,
    NetworkError,
    OfflineCacheError,
)
from offline_cache.protocols import CacheStorage, CacheStore, Fetcher
from offline_cache.repositories import HttpxFetcher, MemoryCacheStorage, RedisCacheStorage
from offline_cache.services import OfflineCacheService, RouteTable, Strategy

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Protocols (interfaces)
    "CacheStorage",
    "CacheStore",
    "Fetcher",
    # Services
    "OfflineCacheService",
    "RouteTable",
    "Strategy",
    # Repositories
    "HttpxFetcher",
    "MemoryCacheStorage",
    "RedisCacheStorage",
    # Entities
    "CachedRequest",
    "CachedResponse",
    # Errors
    "OfflineCacheError",
    "NetworkError",
    "CacheStorageError",
    "InstallError",
    "InvalidPushPayloadError",
]
