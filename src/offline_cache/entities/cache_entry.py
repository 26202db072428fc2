"""Cache entry domain entity."""

from dataclasses import dataclass

from .http import CachedRequest, CachedResponse


@dataclass(frozen=True)
class CacheEntry:
    """A (request, response) pair held by a cache partition.

    Entries never expire on their own; they live until deleted explicitly
    or until the whole partition is dropped on activation.

    Attributes:
        request: The request used as the key
        response: The stored response
        stored_at: Unix timestamp of the write
    """

    request: CachedRequest
    response: CachedResponse
    stored_at: float
