"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Worker and handlers stored in app.state during lifespan
    - Routes depend on the handlers, retrieved from request.app.state
    - Clean separation, no global mutable state
"""

from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from offline_cache.handlers import ProxyHandler, WorkerHandler
from offline_cache.logger import get_logger
from offline_cache.services import OfflineCacheService

logger = get_logger(__name__)


def get_worker_handler(request: Request) -> WorkerHandler:
    """Dependency injection for WorkerHandler from app.state.

    Raises:
        RuntimeError: If the handler is not initialized
    """
    handler = getattr(request.app.state, "worker_handler", None)
    if handler is None:
        raise RuntimeError("WorkerHandler not initialized. Check lifespan setup.")
    return handler


def get_proxy_handler(request: Request) -> ProxyHandler:
    """Dependency injection for ProxyHandler from app.state.

    Raises:
        RuntimeError: If the handler is not initialized
    """
    handler = getattr(request.app.state, "proxy_handler", None)
    if handler is None:
        raise RuntimeError("ProxyHandler not initialized. Check lifespan setup.")
    return handler


def create_lifespan(
    worker: OfflineCacheService | None = None,
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """Build the lifespan context manager.

    Args:
        worker: Pre-built worker (tests inject one with a fake network).
            If None, one is created from settings on startup.

    Returns:
        Lifespan function for ``FastAPI(lifespan=...)``
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Initialize the worker, install and activate it, store it in app.state.

        Cleanup:
            Drains background work, closes the network client and removes
            everything from app.state on shutdown
        """
        service = worker or OfflineCacheService.create()

        if await service.start():
            logger.info("Worker %s active", service.lifecycle.version)
        else:
            logger.warning("Worker not active; requests pass straight through")

        app.state.worker = service
        app.state.worker_handler = WorkerHandler(worker=service)
        app.state.proxy_handler = ProxyHandler(
            worker=service, origin_url=service.lifecycle.origin_url
        )

        yield

        await service.close()
        del app.state.proxy_handler
        del app.state.worker_handler
        del app.state.worker
        logger.info("Worker shut down")

    return lifespan


# Type aliases for cleaner dependency injection
WorkerHandlerDep = Annotated[WorkerHandler, Depends(get_worker_handler)]
ProxyHandlerDep = Annotated[ProxyHandler, Depends(get_proxy_handler)]
