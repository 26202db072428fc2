"""Cache storage protocols.

A ``CacheStorage`` is the registry of named partitions; a ``CacheStore``
is one partition holding (request, response) pairs keyed by
``CachedRequest.cache_key``.

Implementations:
- In-process dictionaries (default)
- Redis hashes, shared by every worker process
"""

from typing import Protocol, runtime_checkable

from offline_cache.entities import CachedRequest, CachedResponse


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for a single named cache partition."""

    @property
    def name(self) -> str:
        """Partition name, e.g. ``static-v1.0.0``."""
        ...

    def match(self, request: CachedRequest) -> CachedResponse | None:
        """Look up the stored response for a request.

        Args:
            request: The request to look up

        Returns:
            The stored response, or None on a miss
        """
        ...

    def put(self, request: CachedRequest, response: CachedResponse) -> None:
        """Store a response, replacing any previous one for the same key.

        Args:
            request: The request used as the key
            response: The response to store
        """
        ...

    def delete(self, request: CachedRequest) -> bool:
        """Delete the entry for a request.

        Returns:
            True if an entry was deleted, False otherwise
        """
        ...

    def keys(self) -> list[CachedRequest]:
        """List stored requests in insertion order."""
        ...

    def count(self) -> int:
        """Count stored entries."""
        ...


@runtime_checkable
class CacheStorage(Protocol):
    """Protocol for the registry of named cache partitions."""

    def open(self, name: str) -> CacheStore:
        """Open a partition, creating it if it does not exist."""
        ...

    def has(self, name: str) -> bool:
        """Check whether a partition exists."""
        ...

    def delete(self, name: str) -> bool:
        """Drop a partition and all its entries.

        Returns:
            True if the partition existed, False otherwise
        """
        ...

    def keys(self) -> list[str]:
        """List partition names in creation order."""
        ...

    def health_check(self) -> bool:
        """Check if the backend is reachable."""
        ...
