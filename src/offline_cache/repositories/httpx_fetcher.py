"""httpx-based implementation of the Fetcher protocol.

Relative URLs are resolved against the site origin. Responses are read in
full so they can be cached; headers that describe the transfer rather than
the content (encoding, length, hop-by-hop) are dropped because httpx has
already decoded the body.
"""

import httpx

from offline_cache.config import settings
from offline_cache.entities import CachedRequest, CachedResponse
from offline_cache.exceptions import NetworkError

_TRANSFER_HEADERS = frozenset(
    {
        "connection",
        "content-encoding",
        "content-length",
        "keep-alive",
        "transfer-encoding",
    }
)

_REQUEST_SKIP_HEADERS = frozenset({"host", "content-length", "connection"})


def split_headers(headers: httpx.Headers) -> tuple[dict[str, str], tuple[str, ...]]:
    """Flatten response headers into a dict plus the Set-Cookie values.

    Repeated fields are combined into one comma-separated value. Set-Cookie
    is kept as a list because its values may themselves contain commas.
    """
    combined: dict[str, str] = {}
    cookies: list[str] = []
    for name, value in headers.multi_items():
        name = name.lower()
        if name in _TRANSFER_HEADERS:
            continue
        if name == "set-cookie":
            cookies.append(value)
        elif name in combined:
            combined[name] = f"{combined[name]}, {value}"
        else:
            combined[name] = value
    return combined, tuple(cookies)


class HttpxFetcher:
    """Async network fetcher.

    This class satisfies the Fetcher protocol through structural typing.

    Example:
        ```python
        fetcher = HttpxFetcher.create(origin_url="https://doctorfix.co.il")
        response = await fetcher.fetch(CachedRequest.get("https://doctorfix.co.il/"))
        print(response.status)
        await fetcher.close()
        ```
    """

    def __init__(
        self,
        origin_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            origin_url: Base URL for relative requests. Defaults to settings.
            timeout: Request timeout in seconds, None for no timeout.
            transport: Custom httpx transport (e.g. ``httpx.MockTransport``).
        """
        self._origin_url = (origin_url or settings.origin_url).rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def create(
        cls,
        origin_url: str | None = None,
        timeout: float | None = None,
    ) -> "HttpxFetcher":
        """Factory method to create HttpxFetcher with defaults from settings."""
        return cls(
            origin_url=origin_url,
            timeout=timeout if timeout is not None else settings.network_timeout,
        )

    @property
    def origin_url(self) -> str:
        return self._origin_url

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._origin_url,
                timeout=self._timeout,
                transport=self._transport,
                follow_redirects=True,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    async def fetch(self, request: CachedRequest) -> CachedResponse:
        """Send a request over the network.

        Raises:
            NetworkError: If the request cannot complete (connection failure,
                timeout, redirect loop, undecodable body)
        """
        headers = {k: v for k, v in request.headers.items() if k not in _REQUEST_SKIP_HEADERS}
        try:
            response = await self.client.request(
                request.method,
                request.url,
                headers=headers,
                content=request.body or None,
            )
        except httpx.RequestError as e:
            raise NetworkError(request.url, str(e) or type(e).__name__) from e

        response_headers, cookies = split_headers(response.headers)
        return CachedResponse(
            status=response.status_code,
            headers=response_headers,
            body=response.content,
            url=str(response.url),
            cookies=cookies,
        )

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
