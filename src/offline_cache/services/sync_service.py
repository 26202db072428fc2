"""Background sync: an outbox of form submissions replayed when back online.

Submissions that fail to reach the network are parked in the dynamic
partition. A sync event carrying the registered tag replays them; each one
that goes through is removed, the others stay for the next sync. There is
no retry cap and no backoff.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field

from offline_cache.entities import CachedRequest, CachedResponse
from offline_cache.exceptions import NetworkError
from offline_cache.logger import get_logger
from offline_cache.protocols import CacheStorage, Fetcher

from .tasks import TaskTracker

logger = get_logger(__name__)


@dataclass
class SyncReport:
    """Outcome of one sync event.

    Attributes:
        tag: The sync tag handled
        replayed: URLs of submissions delivered and removed from the outbox
        failed: URLs of submissions kept for the next attempt
    """

    tag: str
    replayed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def remaining(self) -> int:
        return len(self.failed)


class ConnectivityAwareFetcher:
    """Fetcher wrapper that notices when the network comes back.

    The first request that completes after one that could not fires
    ``on_online``; that is what triggers pending sync events.
    """

    def __init__(self, fetcher: Fetcher) -> None:
        self._fetcher = fetcher
        self._online = True
        self._listeners: list[Callable[[], None]] = []

    @property
    def online(self) -> bool:
        return self._online

    def on_online(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    async def fetch(self, request: CachedRequest) -> CachedResponse:
        try:
            response = await self._fetcher.fetch(request)
        except NetworkError:
            self._online = False
            raise

        if not self._online:
            self._online = True
            logger.info("Network connectivity restored")
            for listener in self._listeners:
                listener()
        return response


class BackgroundSyncService:
    """Outbox for contact-form submissions.

    Example:
        ```python
        sync = BackgroundSyncService(storage, fetcher, tracker, "dynamic-v1.0.0")
        sync.enqueue(submission)
        report = await sync.handle_sync("contact-form-sync")
        print(report.replayed, report.failed)
        ```
    """

    def __init__(
        self,
        storage: CacheStorage,
        fetcher: Fetcher,
        tracker: TaskTracker,
        outbox_cache_name: str,
        sync_tag: str = "contact-form-sync",
        contact_path: str = "/api/contact",
    ) -> None:
        self._storage = storage
        self._fetcher = fetcher
        self._tracker = tracker
        self._outbox_cache_name = outbox_cache_name
        self._sync_tag = sync_tag
        self._contact_path = contact_path
        self._registered: set[str] = set()
        self._lock = asyncio.Lock()

    @property
    def sync_tag(self) -> str:
        return self._sync_tag

    @property
    def registered_tags(self) -> set[str]:
        return set(self._registered)

    def register(self, tag: str) -> None:
        """Ask for a sync event with ``tag`` once connectivity returns."""
        self._registered.add(tag)

    def is_queueable(self, request: CachedRequest) -> bool:
        """True for the submissions this outbox replays."""
        return request.method == "POST" and self._contact_path in request.url

    def enqueue(self, request: CachedRequest) -> CachedResponse:
        """Park a submission in the outbox and register the sync tag.

        Returns:
            A ``202 Queued`` response for the submitter
        """
        placeholder = CachedResponse.text_response("Queued", status=202)
        self._storage.open(self._outbox_cache_name).put(request, placeholder)
        self.register(self._sync_tag)
        logger.info("Queued %s %s for background sync", request.method, request.url)
        return placeholder

    def pending(self) -> list[CachedRequest]:
        """Submissions waiting in the outbox."""
        cache = self._storage.open(self._outbox_cache_name)
        return [r for r in cache.keys() if self.is_queueable(r)]

    async def handle_sync(self, tag: str) -> SyncReport | None:
        """Handle a sync event.

        Args:
            tag: The event's tag

        Returns:
            A report, or None if the tag is not the one this outbox uses
        """
        if tag != self._sync_tag:
            return None

        async with self._lock:
            report = await self._sync_contact_forms()

        if not report.failed:
            self._registered.discard(tag)
        return report

    async def _sync_contact_forms(self) -> SyncReport:
        report = SyncReport(tag=self._sync_tag)
        cache = self._storage.open(self._outbox_cache_name)

        for request in self.pending():
            try:
                await self._fetcher.fetch(request)
            except NetworkError as e:
                logger.error("Failed to sync form: %s", e)
                report.failed.append(request.url)
                continue
            cache.delete(request)
            report.replayed.append(request.url)

        return report

    def sync_registered(self) -> list["asyncio.Task[SyncReport | None]"]:
        """Fire a sync event for every registered tag in the background."""
        return [
            self._tracker.wait_until(self.handle_sync(tag), name=f"sync {tag}")
            for tag in sorted(self._registered)
        ]
