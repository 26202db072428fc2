"""Protocol interfaces for swappable implementations.

Protocols enable:
- Easy swapping of storage backends (in-memory → Redis)
- Unit testing with fake network fetchers
- Clear separation of concerns

Usage:
    ```python
    from offline_cache.protocols import CacheStorage, Fetcher

    storage: CacheStorage = MemoryCacheStorage()  # works
    storage: CacheStorage = RedisCacheStorage()   # also works
    ```
"""

from .cache_store import CacheStorage, CacheStore
from .fetcher import Fetcher

__all__ = [
    "CacheStorage",
    "CacheStore",
    "Fetcher",
]
