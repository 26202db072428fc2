"""Error taxonomy for the offline cache.

HTTP error statuses are not exceptions here: like ``fetch``, the network
layer resolves with a response whose ``ok`` flag is false. Only requests
that cannot complete at all raise ``NetworkError``.
"""


class OfflineCacheError(Exception):
    """Base class for all offline cache errors."""


class NetworkError(OfflineCacheError):
    """The network request could not complete (offline, DNS failure, timeout)."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Network request to {url} failed: {reason}")
        self.url = url
        self.reason = reason


class CacheStorageError(OfflineCacheError):
    """The cache backend failed to read or write (connection lost, quota exceeded)."""


class InstallError(OfflineCacheError):
    """Pre-caching the static asset list failed; nothing was stored."""

    def __init__(self, failed: list[str]) -> None:
        super().__init__(f"Failed to pre-cache static assets: {', '.join(failed)}")
        self.failed = failed


class InvalidPushPayloadError(OfflineCacheError):
    """The push message body is not a JSON object with a string title."""
