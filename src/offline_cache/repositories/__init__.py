"""Repository layer for data access.

This layer hides the cache backends and the network behind protocol-based
interfaces (see ``offline_cache.protocols``). Any class implementing the
required methods satisfies the protocol, no inheritance needed.
"""

from offline_cache.protocols import CacheStorage, CacheStore, Fetcher

from .httpx_fetcher import HttpxFetcher
from .memory_repository import MemoryCache, MemoryCacheStorage
from .redis_repository import RedisCache, RedisCacheStorage

__all__ = [
    "CacheStorage",
    "CacheStore",
    "Fetcher",
    "HttpxFetcher",
    "MemoryCache",
    "MemoryCacheStorage",
    "RedisCache",
    "RedisCacheStorage",
]
