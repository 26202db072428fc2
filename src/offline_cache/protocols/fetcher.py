"""Network fetcher protocol."""

from typing import Protocol, runtime_checkable

from offline_cache.entities import CachedRequest, CachedResponse


@runtime_checkable
class Fetcher(Protocol):
    """Protocol for the network side of every strategy.

    Mirrors ``fetch``: HTTP error statuses resolve normally (check
    ``response.ok``), only requests that cannot complete raise.
    """

    async def fetch(self, request: CachedRequest) -> CachedResponse:
        """Perform the request over the network.

        Args:
            request: The request to send

        Returns:
            The network response

        Raises:
            NetworkError: If the request could not complete
        """
        ...
