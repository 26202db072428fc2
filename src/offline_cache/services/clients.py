"""Registry of window clients (open tabs) the worker can control."""

import uuid

from offline_cache.entities import OpenWindowCommand, WindowClient
from offline_cache.logger import get_logger

logger = get_logger(__name__)


class ClientRegistry:
    """Tracks clients, which worker version controls them, and window commands."""

    def __init__(self) -> None:
        self._clients: dict[str, WindowClient] = {}

    def register(self, url: str, controller: str | None = None) -> WindowClient:
        """Register a newly loaded page.

        Args:
            url: URL the page shows
            controller: Version tag already controlling it, if any
        """
        client = WindowClient(id=uuid.uuid4().hex, url=url, controller=controller)
        self._clients[client.id] = client
        return client

    def get(self, client_id: str) -> WindowClient | None:
        return self._clients.get(client_id)

    def all(self) -> list[WindowClient]:
        return list(self._clients.values())

    def claim(self, version: str) -> int:
        """Take control of every registered client without a reload.

        Returns:
            Number of clients now controlled by ``version``
        """
        for client in self._clients.values():
            client.controller = version
        return len(self._clients)

    def controlled_by_other(self, version: str) -> bool:
        """True if some client is controlled by a different worker version."""
        return any(
            client.controller is not None and client.controller != version
            for client in self._clients.values()
        )

    def open_window(self, url: str) -> WindowClient:
        """Open a new window and give it focus."""
        for client in self._clients.values():
            client.focused = False
        client = WindowClient(id=uuid.uuid4().hex, url=url, focused=True)
        self._clients[client.id] = client
        logger.info("Opened window %s at %s", client.id, url)
        return client

    def dispatch(self, command: OpenWindowCommand) -> WindowClient:
        """Execute a window command."""
        return self.open_window(command.url)
