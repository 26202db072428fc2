"""Strategy executors.

Each strategy arbitrates between one cache partition and the network for a
single request. None of them raises for network or storage failures: they
fall back to the cache, or to a synthetic 503 response.
"""

from offline_cache.entities import CachedRequest, CachedResponse
from offline_cache.exceptions import CacheStorageError, NetworkError
from offline_cache.logger import get_logger
from offline_cache.protocols import CacheStore, Fetcher

from .offline_page import offline_page_response, offline_response
from .tasks import TaskTracker

logger = get_logger(__name__)


def _store(cache: CacheStore, request: CachedRequest, response: CachedResponse) -> None:
    """Store a clone of a successful network response, logging storage failures."""
    try:
        cache.put(request, response.clone())
    except CacheStorageError as e:
        logger.error("Failed to cache %s in %s: %s", request.url, cache.name, e)


async def cache_first(
    request: CachedRequest,
    cache: CacheStore,
    fetcher: Fetcher,
) -> CachedResponse:
    """Serve from the cache, going to the network only on a miss.

    Args:
        request: The intercepted request
        cache: Partition to read and fill
        fetcher: Network fetcher

    Returns:
        The cached response, the network response, or 503 ``Offline``
    """
    try:
        cached = cache.match(request)
        if cached is not None:
            return cached

        network_response = await fetcher.fetch(request)
        if network_response.ok:
            cache.put(request, network_response.clone())

        return network_response
    except (NetworkError, CacheStorageError) as e:
        logger.error("Cache first strategy failed: %s", e)
        return offline_response()


async def network_first(
    request: CachedRequest,
    cache: CacheStore,
    fetcher: Fetcher,
) -> CachedResponse:
    """Go to the network, falling back to the cache when it is unreachable.

    Business logic:
    1. Fetch; store ``ok`` responses and return the response whatever its status
    2. On a network failure, return the cached response if there is one
    3. Otherwise return the offline page for HTML requests, ``Offline`` for the rest

    Args:
        request: The intercepted request
        cache: Partition to read and fill
        fetcher: Network fetcher

    Returns:
        The network response, the cached response, or a 503 fallback
    """
    try:
        network_response = await fetcher.fetch(request)
    except NetworkError as e:
        logger.info("Network failed, trying cache: %s", e)
    else:
        if network_response.ok:
            _store(cache, request, network_response)
        return network_response

    try:
        cached = cache.match(request)
    except CacheStorageError as e:
        logger.error("Cache lookup failed for %s: %s", request.url, e)
        cached = None

    if cached is not None:
        return cached

    if request.accepts_html:
        return offline_page_response()

    return offline_response()


async def revalidate(
    request: CachedRequest,
    cache: CacheStore,
    fetcher: Fetcher,
    cached: CachedResponse | None,
) -> CachedResponse | None:
    """Refresh one cache entry from the network.

    Returns:
        The network response, or ``cached`` if the network is unreachable
    """
    try:
        network_response = await fetcher.fetch(request)
    except NetworkError as e:
        logger.info("Revalidation of %s failed: %s", request.url, e)
        return cached

    if network_response.ok:
        _store(cache, request, network_response)
    return network_response


async def stale_while_revalidate(
    request: CachedRequest,
    cache: CacheStore,
    fetcher: Fetcher,
    tracker: TaskTracker,
) -> CachedResponse:
    """Serve the cached copy immediately while refreshing it in the background.

    The cache is read before anything else. A refresh is always started and
    handed to ``tracker``; with a cached copy the refresh is not awaited,
    without one the caller waits for it.

    Args:
        request: The intercepted request
        cache: Partition to read and fill
        fetcher: Network fetcher
        tracker: Keeps the refresh alive after the response is returned

    Returns:
        The cached response, the network response, or 503 ``Offline`` when
        neither is available

    Raises:
        CacheStorageError: If the initial cache read fails
    """
    cached = cache.match(request)

    refresh = tracker.wait_until(
        revalidate(request, cache, fetcher, cached),
        name=f"revalidate {request.url}",
    )

    if cached is not None:
        return cached

    response = await refresh
    return response if response is not None else offline_response()
