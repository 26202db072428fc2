"""Worker lifecycle: install, then activate.

States::

    parsed -> installing -> installed -> activating -> activated
                  |
                  +-> redundant (install failed)

Install skips the waiting phase, so an installed worker can be activated
right away. Only an activated worker intercepts requests.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum

from offline_cache.entities import CachedRequest, CachedResponse
from offline_cache.exceptions import InstallError, NetworkError
from offline_cache.logger import get_logger
from offline_cache.protocols import CacheStorage, Fetcher

from .clients import ClientRegistry
from .routing import STATIC_ASSETS

logger = get_logger(__name__)


class WorkerState(str, Enum):
    PARSED = "parsed"
    INSTALLING = "installing"
    INSTALLED = "installed"
    ACTIVATING = "activating"
    ACTIVATED = "activated"
    REDUNDANT = "redundant"


@dataclass(frozen=True)
class ActivationReport:
    """Outcome of an activation.

    Attributes:
        deleted_caches: Partitions dropped because they belong to another version
        claimed_clients: Number of clients taken over
    """

    deleted_caches: list[str]
    claimed_clients: int


class WorkerLifecycle:
    """Lifecycle state machine for one worker version.

    Example:
        ```python
        lifecycle = WorkerLifecycle(storage, fetcher, clients, ...)
        await lifecycle.install()
        report = lifecycle.activate()
        print(report.deleted_caches)
        ```
    """

    def __init__(
        self,
        storage: CacheStorage,
        fetcher: Fetcher,
        clients: ClientRegistry,
        origin_url: str,
        version: str,
        static_cache_name: str,
        dynamic_cache_name: str,
        static_assets: tuple[str, ...] = STATIC_ASSETS,
    ) -> None:
        self._storage = storage
        self._fetcher = fetcher
        self._clients = clients
        self._origin_url = origin_url.rstrip("/")
        self._version = version
        self._static_cache_name = static_cache_name
        self._dynamic_cache_name = dynamic_cache_name
        self._static_assets = static_assets
        self._state = WorkerState.PARSED
        self._update_available = False

    @property
    def state(self) -> WorkerState:
        return self._state

    @property
    def version(self) -> str:
        return self._version

    @property
    def origin_url(self) -> str:
        return self._origin_url

    @property
    def is_active(self) -> bool:
        return self._state is WorkerState.ACTIVATED

    @property
    def update_available(self) -> bool:
        """True when this version installed while an older one controlled clients."""
        return self._update_available

    @property
    def current_caches(self) -> tuple[str, str]:
        return (self._static_cache_name, self._dynamic_cache_name)

    def asset_request(self, path: str) -> CachedRequest:
        return CachedRequest.get(f"{self._origin_url}{path}")

    async def _fetch_asset(self, request: CachedRequest) -> CachedResponse | None:
        try:
            response = await self._fetcher.fetch(request)
        except NetworkError as e:
            logger.error("Failed to fetch %s: %s", request.url, e)
            return None
        return response if response.ok else None

    async def install(self) -> int:
        """Pre-cache the static asset list and skip waiting.

        All assets are fetched concurrently and stored only if every one of
        them succeeded.

        An already activated worker only refreshes its static partition: it
        stays activated whether or not the refresh succeeds.

        Returns:
            Number of assets cached

        Raises:
            InstallError: If any asset could not be fetched; nothing is
                stored and a worker that was not yet active becomes redundant
        """
        refreshing = self.is_active
        if refreshing:
            logger.info("Worker %s refreshing static assets", self._version)
        else:
            logger.info("Worker %s installing...", self._version)
            self._state = WorkerState.INSTALLING

        requests = [self.asset_request(path) for path in self._static_assets]
        responses = await asyncio.gather(*(self._fetch_asset(r) for r in requests))

        failed = [r.url for r, resp in zip(requests, responses) if resp is None]
        if failed:
            if not refreshing:
                self._state = WorkerState.REDUNDANT
            raise InstallError(failed)

        logger.info("Caching static assets")
        cache = self._storage.open(self._static_cache_name)
        for request, response in zip(requests, responses):
            cache.put(request, response)  # type: ignore[arg-type]

        if refreshing:
            return len(requests)

        self._update_available = self._clients.controlled_by_other(self._version)
        # Skip waiting: installed workers are eligible for activation immediately
        self._state = WorkerState.INSTALLED
        return len(requests)

    def activate(self) -> ActivationReport:
        """Drop partitions of other versions and claim every client.

        Raises:
            RuntimeError: If the worker has not been installed
        """
        if self._state not in (WorkerState.INSTALLED, WorkerState.ACTIVATED):
            raise RuntimeError(f"Cannot activate a worker in state {self._state.value}")

        logger.info("Worker %s activating...", self._version)
        self._state = WorkerState.ACTIVATING

        deleted = []
        for name in self._storage.keys():
            if name not in self.current_caches:
                logger.info("Deleting old cache: %s", name)
                self._storage.delete(name)
                deleted.append(name)

        claimed = self._clients.claim(self._version)
        self._update_available = False
        self._state = WorkerState.ACTIVATED
        return ActivationReport(deleted_caches=deleted, claimed_clients=claimed)
