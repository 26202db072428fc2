"""HTTP handlers for worker events and introspection.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling.
"""

from fastapi import HTTPException, status

from offline_cache.dto import (
    ActivateResponse,
    CacheStatsResponse,
    HealthCheckResponse,
    InstallResponse,
    NotificationActionItem,
    NotificationClickRequest,
    NotificationClickResponse,
    NotificationResponse,
    RegisterClientRequest,
    SyncRequest,
    SyncResponse,
    WindowClientItem,
    WorkerStateResponse,
)
from offline_cache.entities import Notification, WindowClient
from offline_cache.exceptions import CacheStorageError, InstallError, InvalidPushPayloadError
from offline_cache.services import OfflineCacheService


def _notification_dto(notification: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=notification.id,
        title=notification.title,
        body=notification.body,
        icon=notification.icon,
        badge=notification.badge,
        vibrate=notification.vibrate,
        data=notification.data,
        actions=[
            NotificationActionItem(action=a.action, title=a.title, icon=a.icon)
            for a in notification.actions
        ],
        closed=notification.closed,
    )


def _client_dto(client: WindowClient) -> WindowClientItem:
    return WindowClientItem(
        id=client.id,
        url=client.url,
        focused=client.focused,
        controller=client.controller,
    )


class WorkerHandler:
    """HTTP handlers for lifecycle, sync, push and client events.

    Example:
        ```python
        handler = WorkerHandler(worker=OfflineCacheService.create())

        @app.post("/sw/sync", response_model=SyncResponse)
        async def sync(request: SyncRequest):
            return await handler.sync(request)
        ```
    """

    def __init__(self, worker: OfflineCacheService) -> None:
        """Initialize the worker handler.

        Args:
            worker: The worker service (required).
        """
        self._worker = worker

    def state(self) -> WorkerStateResponse:
        """Handle GET /sw/state requests."""
        lifecycle = self._worker.lifecycle
        return WorkerStateResponse(
            version=lifecycle.version,
            state=lifecycle.state.value,
            update_available=lifecycle.update_available,
            caches=list(lifecycle.current_caches),
        )

    async def install(self) -> InstallResponse:
        """Handle POST /sw/install requests.

        Raises:
            HTTPException: 502 if the static assets could not be fetched,
                503 if the cache backend failed
        """
        try:
            count = await self._worker.install()
        except InstallError as e:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=str(e),
            ) from e
        except CacheStorageError as e:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Failed to store static assets: {e}",
            ) from e

        return InstallResponse(
            success=True,
            cached_assets=count,
            state=self._worker.lifecycle.state.value,
        )

    def activate(self) -> ActivateResponse:
        """Handle POST /sw/activate requests.

        Raises:
            HTTPException: 409 if the worker is not installed, 503 if the
                cache backend failed
        """
        try:
            report = self._worker.activate()
        except RuntimeError as e:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
        except CacheStorageError as e:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Failed to clean up caches: {e}",
            ) from e

        return ActivateResponse(
            success=True,
            deleted_caches=report.deleted_caches,
            claimed_clients=report.claimed_clients,
            state=self._worker.lifecycle.state.value,
        )

    def get_stats(self) -> CacheStatsResponse:
        """Handle GET /sw/caches requests."""
        try:
            stats = self._worker.get_stats()
        except CacheStorageError as e:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Failed to get stats: {e}",
            ) from e

        return CacheStatsResponse(**stats)

    async def sync(self, request: SyncRequest) -> SyncResponse:
        """Handle POST /sw/sync requests."""
        try:
            report = await self._worker.handle_sync(request.tag)
        except CacheStorageError as e:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Failed to read sync outbox: {e}",
            ) from e

        if report is None:
            return SyncResponse(tag=request.tag, handled=False)

        return SyncResponse(
            tag=report.tag,
            handled=True,
            replayed=report.replayed,
            failed=report.failed,
            remaining=report.remaining,
        )

    def push(self, body: bytes) -> NotificationResponse | None:
        """Handle POST /sw/push requests.

        Returns:
            The notification shown, or None when the push carried no payload

        Raises:
            HTTPException: 400 if the payload is malformed
        """
        try:
            notification = self._worker.handle_push(body)
        except InvalidPushPayloadError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

        if notification is None:
            return None
        return _notification_dto(notification)

    def list_notifications(self) -> list[NotificationResponse]:
        """Handle GET /sw/notifications requests."""
        return [_notification_dto(n) for n in self._worker.notifications.active()]

    def notification_click(
        self, notification_id: str, request: NotificationClickRequest
    ) -> NotificationClickResponse:
        """Handle POST /sw/notifications/{id}/click requests.

        Raises:
            HTTPException: 404 if the notification is unknown
        """
        try:
            command = self._worker.handle_notification_click(notification_id, request.action)
        except KeyError as e:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Unknown notification: {notification_id}",
            ) from e

        return NotificationClickResponse(
            closed=True,
            opened_url=command.url if command else None,
        )

    def list_clients(self) -> list[WindowClientItem]:
        """Handle GET /sw/clients requests."""
        return [_client_dto(c) for c in self._worker.clients.all()]

    def register_client(self, request: RegisterClientRequest) -> WindowClientItem:
        """Handle POST /sw/clients requests."""
        controller = self._worker.lifecycle.version if self._worker.lifecycle.is_active else None
        return _client_dto(self._worker.clients.register(request.url, controller=controller))

    def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        is_healthy = self._worker.is_healthy()
        return HealthCheckResponse(
            status="healthy" if is_healthy else "unhealthy",
            cache_healthy=is_healthy,
            state=self._worker.lifecycle.state.value,
        )
