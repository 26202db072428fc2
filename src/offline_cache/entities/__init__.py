"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .cache_entry import CacheEntry
from .client import OpenWindowCommand, WindowClient
from .http import CachedRequest, CachedResponse
from .notification import Notification, NotificationAction

__all__ = [
    "CacheEntry",
    "CachedRequest",
    "CachedResponse",
    "Notification",
    "NotificationAction",
    "OpenWindowCommand",
    "WindowClient",
]
