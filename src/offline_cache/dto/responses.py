"""Response DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class WorkerStateResponse(BaseModel):
    """Lifecycle state of the worker."""

    version: str = Field(..., description="Worker version tag")
    state: str = Field(..., description="Lifecycle state")
    update_available: bool = Field(
        ..., description="A new version installed while clients were controlled by an older one"
    )
    caches: list[str] = Field(..., description="Names of the current static and dynamic partitions")


class InstallResponse(BaseModel):
    """Response DTO for install."""

    success: bool
    cached_assets: int = Field(..., description="Number of static assets pre-cached")
    state: str


class ActivateResponse(BaseModel):
    """Response DTO for activate."""

    success: bool
    deleted_caches: list[str] = Field(default_factory=list)
    claimed_clients: int = 0
    state: str


class CacheStatsResponse(BaseModel):
    """Response DTO for partition statistics."""

    version: str
    state: str
    caches: dict[str, int] = Field(..., description="Entry count per partition")
    pending_tasks: int = Field(..., description="Background tasks not yet settled")


class SyncResponse(BaseModel):
    """Response DTO for a sync event."""

    tag: str
    handled: bool = Field(..., description="False when no handler is registered for the tag")
    replayed: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
    remaining: int = 0


class NotificationActionItem(BaseModel):
    """Single action button on a notification."""

    action: str
    title: str
    icon: str | None = None


class NotificationResponse(BaseModel):
    """Response DTO for a shown notification."""

    id: str
    title: str
    body: str | None = None
    icon: str
    badge: str
    vibrate: list[int]
    data: Any = None
    actions: list[NotificationActionItem]
    closed: bool = False


class WindowClientItem(BaseModel):
    """Single window client."""

    id: str
    url: str
    focused: bool
    controller: str | None = None


class NotificationClickResponse(BaseModel):
    """Response DTO for a notification click."""

    closed: bool
    opened_url: str | None = Field(None, description="URL opened by the click, if any")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    cache_healthy: bool = Field(..., description="Whether the cache backend is reachable")
    state: str = Field(..., description="Worker lifecycle state")
