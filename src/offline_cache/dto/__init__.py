"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import NotificationClickRequest, RegisterClientRequest, SyncRequest
from .responses import (
    ActivateResponse,
    CacheStatsResponse,
    HealthCheckResponse,
    InstallResponse,
    NotificationActionItem,
    NotificationClickResponse,
    NotificationResponse,
    SyncResponse,
    WindowClientItem,
    WorkerStateResponse,
)

__all__ = [
    "ActivateResponse",
    "CacheStatsResponse",
    "HealthCheckResponse",
    "InstallResponse",
    "NotificationActionItem",
    "NotificationClickRequest",
    "NotificationClickResponse",
    "NotificationResponse",
    "RegisterClientRequest",
    "SyncRequest",
    "SyncResponse",
    "WindowClientItem",
    "WorkerStateResponse",
]
