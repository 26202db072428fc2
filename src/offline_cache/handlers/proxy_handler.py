"""HTTP handler for intercepted requests.

Every request that reaches the catch-all route is rebuilt against the site
origin and handed to the worker, the way a page's fetches reach a service
worker. Requests the worker does not intercept go straight to the network.
"""

from fastapi import HTTPException, Request, Response, status

from offline_cache.entities import CachedRequest, CachedResponse
from offline_cache.exceptions import NetworkError
from offline_cache.services import OfflineCacheService

ROUTE_HEADER = "x-offline-cache-route"
NETWORK_ROUTE = "network"

_SKIP_RESPONSE_HEADERS = frozenset({"content-length"})


def to_http_response(response: CachedResponse, route: str) -> Response:
    """Convert a worker response into a FastAPI response."""
    headers = {k: v for k, v in response.headers.items() if k not in _SKIP_RESPONSE_HEADERS}
    headers[ROUTE_HEADER] = route
    http_response = Response(content=response.body, status_code=response.status, headers=headers)
    for cookie in response.cookies:
        http_response.headers.append("set-cookie", cookie)
    return http_response


class ProxyHandler:
    """Maps incoming HTTP requests onto the worker's fetch handling.

    Example:
        ```python
        handler = ProxyHandler(worker=worker, origin_url="https://doctorfix.co.il")

        @app.api_route("/{path:path}", methods=["GET", "POST"])
        async def proxy(request: Request) -> Response:
            return await handler.handle(request)
        ```
    """

    def __init__(self, worker: OfflineCacheService, origin_url: str) -> None:
        self._worker = worker
        self._origin_url = origin_url.rstrip("/")

    async def to_cached_request(self, request: Request) -> CachedRequest:
        url = f"{self._origin_url}{request.url.path}"
        if request.url.query:
            url = f"{url}?{request.url.query}"
        return CachedRequest(
            method=request.method,
            url=url,
            headers=dict(request.headers),
            body=await request.body(),
        )

    async def handle(self, request: Request) -> Response:
        """Handle one intercepted request.

        Raises:
            HTTPException: 502 if a non-intercepted request cannot reach the network
        """
        cached_request = await self.to_cached_request(request)

        outcome = await self._worker.handle_fetch(cached_request)
        if outcome is not None:
            return to_http_response(outcome.response, outcome.route.name)

        try:
            response = await self._worker.forward(cached_request)
        except NetworkError as e:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Upstream unreachable: {e.reason}",
            ) from e

        return to_http_response(response, NETWORK_ROUTE)
