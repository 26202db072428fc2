"""Service layer for business logic.

Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Worker) -> (Cache storage / network)

Usage:
    ```python
    from offline_cache.services import OfflineCacheService

    # Using factory method (recommended)
    worker = OfflineCacheService.create()

    # Or manual creation
    worker = OfflineCacheService(storage=MemoryCacheStorage(), fetcher=HttpxFetcher())
    ```
"""

from .clients import ClientRegistry
from .lifecycle import ActivationReport, WorkerLifecycle, WorkerState
from .notification_service import NotificationService
from .offline_page import OFFLINE_PAGE_HTML, offline_page_response, offline_response
from .routing import Partition, Route, RouteTable, Strategy
from .strategies import cache_first, network_first, stale_while_revalidate
from .sync_service import BackgroundSyncService, ConnectivityAwareFetcher, SyncReport
from .tasks import TaskTracker
from .worker_service import FetchOutcome, OfflineCacheService, create_storage

__all__ = [
    "ActivationReport",
    "BackgroundSyncService",
    "ClientRegistry",
    "ConnectivityAwareFetcher",
    "FetchOutcome",
    "NotificationService",
    "OFFLINE_PAGE_HTML",
    "OfflineCacheService",
    "Partition",
    "Route",
    "RouteTable",
    "Strategy",
    "SyncReport",
    "TaskTracker",
    "WorkerLifecycle",
    "WorkerState",
    "cache_first",
    "create_storage",
    "network_first",
    "offline_page_response",
    "offline_response",
    "stale_while_revalidate",
]
