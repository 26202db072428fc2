from typing import Any

from fastapi import FastAPI, Request, Response, status

from offline_cache.api.dependencies import ProxyHandlerDep, WorkerHandlerDep, create_lifespan
from offline_cache.config import settings
from offline_cache.dto import (
    ActivateResponse,
    CacheStatsResponse,
    HealthCheckResponse,
    InstallResponse,
    NotificationClickRequest,
    NotificationClickResponse,
    NotificationResponse,
    RegisterClientRequest,
    SyncRequest,
    SyncResponse,
    WindowClientItem,
    WorkerStateResponse,
)
from offline_cache.services import OfflineCacheService

PROXY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(worker: OfflineCacheService | None = None) -> FastAPI:
    """Build the offline cache application.

    Args:
        worker: Pre-built worker. If None, one is created from settings on startup.

    Returns:
        The FastAPI application
    """
    app = FastAPI(
        title="Offline Cache",
        description="Offline-first caching proxy with background sync and push notifications",
        version="1.0.0",
        lifespan=create_lifespan(worker),
    )

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(handler: WorkerHandlerDep) -> HealthCheckResponse:
        """Health check endpoint."""
        return handler.health_check()

    @app.get("/sw/state", response_model=WorkerStateResponse)
    async def worker_state(handler: WorkerHandlerDep) -> WorkerStateResponse:
        """Current lifecycle state."""
        return handler.state()

    @app.post("/sw/install", response_model=InstallResponse)
    async def install(handler: WorkerHandlerDep) -> InstallResponse:
        """Pre-cache the static assets."""
        return await handler.install()

    @app.post("/sw/activate", response_model=ActivateResponse)
    async def activate(handler: WorkerHandlerDep) -> ActivateResponse:
        """Drop stale partitions and claim clients."""
        return handler.activate()

    @app.get("/sw/caches", response_model=CacheStatsResponse)
    async def caches(handler: WorkerHandlerDep) -> CacheStatsResponse:
        """Partition names and entry counts."""
        return handler.get_stats()

    @app.post("/sw/sync", response_model=SyncResponse)
    async def sync(request: SyncRequest, handler: WorkerHandlerDep) -> SyncResponse:
        """Fire a background sync event."""
        return await handler.sync(request)

    @app.post(
        "/sw/push",
        response_model=NotificationResponse,
        status_code=status.HTTP_201_CREATED,
        responses={204: {"description": "Push carried no payload"}},
    )
    async def push(request: Request, handler: WorkerHandlerDep) -> Any:
        """Deliver a push message; the raw body is the JSON payload."""
        notification = handler.push(await request.body())
        if notification is None:
            return Response(status_code=status.HTTP_204_NO_CONTENT)
        return notification

    @app.get("/sw/notifications", response_model=list[NotificationResponse])
    async def notifications(handler: WorkerHandlerDep) -> list[NotificationResponse]:
        """Notifications still on screen."""
        return handler.list_notifications()

    @app.post(
        "/sw/notifications/{notification_id}/click",
        response_model=NotificationClickResponse,
    )
    async def notification_click(
        notification_id: str,
        request: NotificationClickRequest,
        handler: WorkerHandlerDep,
    ) -> NotificationClickResponse:
        """Click a notification or one of its actions."""
        return handler.notification_click(notification_id, request)

    @app.get("/sw/clients", response_model=list[WindowClientItem])
    async def clients(handler: WorkerHandlerDep) -> list[WindowClientItem]:
        """Registered window clients."""
        return handler.list_clients()

    @app.post("/sw/clients", response_model=WindowClientItem, status_code=status.HTTP_201_CREATED)
    async def register_client(
        request: RegisterClientRequest, handler: WorkerHandlerDep
    ) -> WindowClientItem:
        """Register a page load."""
        return handler.register_client(request)

    # Must stay last: everything else is an intercepted fetch
    @app.api_route("/{path:path}", methods=PROXY_METHODS, include_in_schema=False)
    async def proxy(request: Request, handler: ProxyHandlerDep) -> Response:
        return await handler.handle(request)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "offline_cache.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
