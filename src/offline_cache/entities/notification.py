"""Notification domain entities."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class NotificationAction:
    """A button shown on a notification."""

    action: str
    title: str
    icon: str | None = None


@dataclass
class Notification:
    """A notification shown in response to a push message.

    Attributes:
        id: Registry identifier, used to route clicks back
        title: Notification title
        body: Notification text
        icon: Icon URL
        badge: Badge URL
        vibrate: Vibration pattern in milliseconds
        data: Opaque data from the push payload
        actions: Buttons offered to the user
        closed: Set once the notification is dismissed or clicked
    """

    id: str
    title: str
    body: str | None
    icon: str
    badge: str
    vibrate: list[int] = field(default_factory=list)
    data: Any = None
    actions: list[NotificationAction] = field(default_factory=list)
    closed: bool = False

    def close(self) -> None:
        self.closed = True
