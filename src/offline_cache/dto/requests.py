"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field


class SyncRequest(BaseModel):
    """Request DTO for firing a background sync event."""

    tag: str = Field(..., description="Sync tag, e.g. contact-form-sync", min_length=1)


class NotificationClickRequest(BaseModel):
    """Request DTO for a notification click."""

    action: str | None = Field(
        None,
        description="Action button clicked ('open' or 'close'); null for the notification body",
    )


class RegisterClientRequest(BaseModel):
    """Request DTO for registering a page load."""

    url: str = Field("/", description="URL the page shows", min_length=1)
