"""Policy selector: an ordered table of routes, first match wins.

Each route pairs a predicate over the request with a strategy and the
partition the strategy works on. Requests that no route may handle
(non-GET, non-HTTP schemes) get ``None`` and fall through to default
network handling.
"""

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from offline_cache.entities import CachedRequest

# Pre-cached on install
STATIC_ASSETS: tuple[str, ...] = (
    "/",
    "/index.html",
    "/manifest.json",
    "/favicon.ico",
)

# Cached on first request, matched against the full URL
CACHE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\.(?:js|css|woff2?|png|jpg|jpeg|webp|svg|ico)$"),
    re.compile(r"^https://fonts\.googleapis\.com"),
    re.compile(r"^https://fonts\.gstatic\.com"),
    re.compile(r"^https://images\.unsplash\.com"),
)

API_PREFIX = "/api/"


class Strategy(str, Enum):
    CACHE_FIRST = "cache-first"
    NETWORK_FIRST = "network-first"
    STALE_WHILE_REVALIDATE = "stale-while-revalidate"


class Partition(str, Enum):
    STATIC = "static"
    DYNAMIC = "dynamic"


@dataclass(frozen=True)
class Route:
    """One row of the routing table.

    Attributes:
        name: Identifier reported alongside responses
        predicate: Decides whether the route handles a request
        strategy: Strategy executed for matching requests
        partition: Partition the strategy reads and writes
    """

    name: str
    predicate: Callable[[CachedRequest], bool]
    strategy: Strategy
    partition: Partition

    def matches(self, request: CachedRequest) -> bool:
        return self.predicate(request)


def is_static_asset(request: CachedRequest, assets: Iterable[str] = STATIC_ASSETS) -> bool:
    return request.path in assets


def is_cacheable_resource(request: CachedRequest) -> bool:
    return any(pattern.search(request.url) for pattern in CACHE_PATTERNS)


def is_api_request(request: CachedRequest) -> bool:
    return request.path.startswith(API_PREFIX)


def is_interceptable(request: CachedRequest) -> bool:
    """Only GET requests over HTTP(S) go through the routing table."""
    return request.method == "GET" and request.is_http


class RouteTable:
    """Ordered list of routes.

    Example:
        ```python
        table = RouteTable.default()
        route = table.select(CachedRequest.get("https://doctorfix.co.il/app.js"))
        print(route.strategy)  # Strategy.STALE_WHILE_REVALIDATE
        ```
    """

    def __init__(self, routes: Iterable[Route]) -> None:
        self._routes = list(routes)

    @classmethod
    def default(cls) -> "RouteTable":
        """The site's routing table."""
        return cls(
            [
                Route("static-assets", is_static_asset, Strategy.CACHE_FIRST, Partition.STATIC),
                Route(
                    "cacheable-resources",
                    is_cacheable_resource,
                    Strategy.STALE_WHILE_REVALIDATE,
                    Partition.DYNAMIC,
                ),
                Route("api", is_api_request, Strategy.NETWORK_FIRST, Partition.DYNAMIC),
                Route("pages", lambda _request: True, Strategy.NETWORK_FIRST, Partition.DYNAMIC),
            ]
        )

    @property
    def routes(self) -> list[Route]:
        return list(self._routes)

    def select(self, request: CachedRequest) -> Route | None:
        """Pick the route for a request.

        Returns:
            The first matching route, or None if the request is not intercepted
        """
        if not is_interceptable(request):
            return None
        for route in self._routes:
            if route.matches(request):
                return route
        return None
