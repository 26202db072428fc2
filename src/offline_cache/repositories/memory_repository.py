"""In-process implementation of CacheStorage.

Partitions live in plain dictionaries, so they are shared by every handler
of one process and lost on restart. Python dictionaries keep insertion
order, which gives ``keys()`` the ordering the protocol promises.
"""

import time

from offline_cache.entities import CacheEntry, CachedRequest, CachedResponse


class MemoryCache:
    """A single partition backed by a dictionary."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._entries: dict[str, CacheEntry] = {}

    @property
    def name(self) -> str:
        return self._name

    def match(self, request: CachedRequest) -> CachedResponse | None:
        entry = self._entries.get(request.cache_key)
        if entry is None:
            return None
        return entry.response.clone()

    def put(self, request: CachedRequest, response: CachedResponse) -> None:
        # Re-inserting moves the key to the end, like a fresh write
        self._entries.pop(request.cache_key, None)
        self._entries[request.cache_key] = CacheEntry(
            request=request,
            response=response.clone(),
            stored_at=time.time(),
        )

    def delete(self, request: CachedRequest) -> bool:
        return self._entries.pop(request.cache_key, None) is not None

    def keys(self) -> list[CachedRequest]:
        return [entry.request for entry in self._entries.values()]

    def count(self) -> int:
        return len(self._entries)


class MemoryCacheStorage:
    """Registry of in-memory partitions.

    Example:
        ```python
        storage = MemoryCacheStorage()
        static = storage.open("static-v1.0.0")
        static.put(CachedRequest.get("https://example.com/"), response)
        ```
    """

    def __init__(self) -> None:
        self._caches: dict[str, MemoryCache] = {}

    def open(self, name: str) -> MemoryCache:
        cache = self._caches.get(name)
        if cache is None:
            cache = MemoryCache(name)
            self._caches[name] = cache
        return cache

    def has(self, name: str) -> bool:
        return name in self._caches

    def delete(self, name: str) -> bool:
        return self._caches.pop(name, None) is not None

    def keys(self) -> list[str]:
        return list(self._caches)

    def health_check(self) -> bool:
        return True
