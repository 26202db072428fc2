"""Fetch orchestration: the worker as a whole.

``OfflineCacheService`` wires the routing table, the strategies, the
lifecycle, background sync and notifications around one cache storage and
one network fetcher. It plays the part of the worker's event handlers:
``handle_fetch``, ``install``/``activate``, ``handle_sync``, ``handle_push``.
"""

from dataclasses import dataclass

from offline_cache.config import settings
from offline_cache.entities import CachedRequest, CachedResponse, Notification, OpenWindowCommand
from offline_cache.exceptions import CacheStorageError, InstallError, NetworkError
from offline_cache.logger import get_logger
from offline_cache.protocols import CacheStorage, Fetcher
from offline_cache.repositories import HttpxFetcher, MemoryCacheStorage, RedisCacheStorage

from .clients import ClientRegistry
from .lifecycle import ActivationReport, WorkerLifecycle
from .notification_service import NotificationService
from .offline_page import offline_response
from .routing import Partition, Route, RouteTable, Strategy
from .strategies import cache_first, network_first, stale_while_revalidate
from .sync_service import BackgroundSyncService, ConnectivityAwareFetcher, SyncReport
from .tasks import TaskTracker

logger = get_logger(__name__)


@dataclass(frozen=True)
class FetchOutcome:
    """An intercepted request's response and the route that produced it."""

    route: Route
    response: CachedResponse


def create_storage(backend: str | None = None) -> CacheStorage:
    """Build the cache storage named by ``backend`` (defaults to settings)."""
    backend = backend or settings.cache_backend
    if backend == "redis":
        return RedisCacheStorage.create()
    return MemoryCacheStorage()


class OfflineCacheService:
    """The offline cache worker.

    Depends on PROTOCOLS, not concrete implementations:
    - CacheStorage: in-memory or Redis
    - Fetcher: httpx, or a fake in tests

    Example:
        ```python
        from offline_cache.services import OfflineCacheService

        worker = OfflineCacheService.create()
        await worker.start()  # install + activate

        outcome = await worker.handle_fetch(
            CachedRequest.get("http://localhost:5173/", {"accept": "text/html"})
        )
        print(outcome.route.name, outcome.response.status)
        ```
    """

    def __init__(
        self,
        storage: CacheStorage,
        fetcher: Fetcher,
        routes: RouteTable | None = None,
        tracker: TaskTracker | None = None,
        clients: ClientRegistry | None = None,
        origin_url: str | None = None,
        version: str | None = None,
        static_cache_name: str | None = None,
        dynamic_cache_name: str | None = None,
        sync_tag: str | None = None,
        contact_path: str | None = None,
    ) -> None:
        """Initialize the worker.

        Args:
            storage: Cache storage backend (required).
            fetcher: Network fetcher (required).
            routes: Routing table. Defaults to ``RouteTable.default()``.
            tracker: Background task tracker. Defaults to a new one.
            clients: Client registry. Defaults to a new one.
            origin_url: Site origin for the static asset list. Defaults to settings.
            version: Worker version tag. Defaults to settings.
            static_cache_name: Static partition name. Defaults to settings.
            dynamic_cache_name: Dynamic partition name. Defaults to settings.
            sync_tag: Background sync tag. Defaults to settings.
            contact_path: URL fragment of queueable submissions. Defaults to settings.
        """
        self._storage = storage
        self._fetcher = ConnectivityAwareFetcher(fetcher)
        self._network = fetcher
        self._routes = routes or RouteTable.default()
        self._tracker = tracker or TaskTracker()
        self._clients = clients or ClientRegistry()
        self._static_cache_name = static_cache_name or settings.static_cache_name
        self._dynamic_cache_name = dynamic_cache_name or settings.dynamic_cache_name

        self._lifecycle = WorkerLifecycle(
            storage=storage,
            fetcher=self._fetcher,
            clients=self._clients,
            origin_url=origin_url or settings.origin_url,
            version=version or settings.version_tag,
            static_cache_name=self._static_cache_name,
            dynamic_cache_name=self._dynamic_cache_name,
        )
        self._sync = BackgroundSyncService(
            storage=storage,
            fetcher=self._fetcher,
            tracker=self._tracker,
            outbox_cache_name=self._dynamic_cache_name,
            sync_tag=sync_tag or settings.sync_tag,
            contact_path=contact_path or settings.contact_path,
        )
        self._notifications = NotificationService(self._clients)

        self._fetcher.on_online(self._sync.sync_registered)

    @classmethod
    def create(
        cls,
        storage: CacheStorage | None = None,
        fetcher: Fetcher | None = None,
    ) -> "OfflineCacheService":
        """Factory method to create the worker with defaults from settings.

        Args:
            storage: Cache storage. If None, built from ``CACHE_BACKEND``.
            fetcher: Network fetcher. If None, an ``HttpxFetcher`` for ``ORIGIN_URL``.

        Returns:
            Configured OfflineCacheService instance
        """
        return cls(
            storage=storage or create_storage(),
            fetcher=fetcher or HttpxFetcher.create(),
        )

    # Lifecycle

    async def install(self) -> int:
        return await self._lifecycle.install()

    def activate(self) -> ActivationReport:
        return self._lifecycle.activate()

    async def start(self) -> bool:
        """Install and activate, as happens when the site registers the worker.

        Returns:
            True if the worker is active, False if installation failed
        """
        try:
            await self.install()
        except (InstallError, CacheStorageError) as e:
            logger.error("Worker installation failed: %s", e)
            return False
        self.activate()
        return True

    # Fetch

    def _cache_name(self, partition: Partition) -> str:
        if partition is Partition.STATIC:
            return self._static_cache_name
        return self._dynamic_cache_name

    async def handle_fetch(self, request: CachedRequest) -> FetchOutcome | None:
        """Intercept a request.

        Args:
            request: The incoming request

        Returns:
            The outcome, or None if the request is left to default handling
            (worker not active, non-GET, non-HTTP scheme)
        """
        if not self._lifecycle.is_active:
            return None

        route = self._routes.select(request)
        if route is None:
            return None

        try:
            cache = self._storage.open(self._cache_name(route.partition))
            if route.strategy is Strategy.CACHE_FIRST:
                response = await cache_first(request, cache, self._fetcher)
            elif route.strategy is Strategy.STALE_WHILE_REVALIDATE:
                response = await stale_while_revalidate(request, cache, self._fetcher, self._tracker)
            else:
                response = await network_first(request, cache, self._fetcher)
        except CacheStorageError as e:
            logger.error("Cache unavailable for %s: %s", request.url, e)
            response = offline_response()

        return FetchOutcome(route=route, response=response)

    async def forward(self, request: CachedRequest) -> CachedResponse:
        """Default handling for requests the worker does not intercept.

        Contact-form submissions that cannot reach the network are queued
        for background sync and answered with ``202``.

        Raises:
            NetworkError: If the network is unreachable and the request cannot be queued
        """
        try:
            return await self._fetcher.fetch(request)
        except NetworkError:
            if self._sync.is_queueable(request):
                return self._sync.enqueue(request)
            raise

    # Background sync

    async def handle_sync(self, tag: str) -> SyncReport | None:
        return await self._sync.handle_sync(tag)

    # Notifications

    def handle_push(self, raw: bytes | None) -> Notification | None:
        return self._notifications.handle_push(raw)

    def handle_notification_click(
        self, notification_id: str, action: str | None
    ) -> OpenWindowCommand | None:
        return self._notifications.handle_click(notification_id, action)

    # Introspection

    def get_stats(self) -> dict:
        """Get partition statistics.

        Returns:
            Dictionary with the version and the entry count of every partition
        """
        caches = {}
        for name in self._storage.keys():
            caches[name] = self._storage.open(name).count()
        return {
            "version": self._lifecycle.version,
            "state": self._lifecycle.state.value,
            "caches": caches,
            "pending_tasks": self._tracker.pending,
        }

    def is_healthy(self) -> bool:
        return self._storage.health_check()

    async def close(self) -> None:
        """Wait for background work, then release the network client."""
        await self._tracker.drain()
        close = getattr(self._network, "close", None)
        if close is not None:
            await close()

    @property
    def lifecycle(self) -> WorkerLifecycle:
        return self._lifecycle

    @property
    def sync(self) -> BackgroundSyncService:
        return self._sync

    @property
    def notifications(self) -> NotificationService:
        return self._notifications

    @property
    def clients(self) -> ClientRegistry:
        return self._clients

    @property
    def tracker(self) -> TaskTracker:
        return self._tracker

    @property
    def storage(self) -> CacheStorage:
        """Get the underlying storage (for testing)."""
        return self._storage

    @property
    def routes(self) -> RouteTable:
        return self._routes
