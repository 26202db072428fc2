"""Push messages and notification clicks."""

import json
import uuid
from typing import Any

from offline_cache.entities import Notification, NotificationAction, OpenWindowCommand
from offline_cache.exceptions import InvalidPushPayloadError
from offline_cache.logger import get_logger

from .clients import ClientRegistry

logger = get_logger(__name__)

ICON = "/favicon.ico"
VIBRATE_PATTERN = [200, 100, 200]
OPEN_ACTION = "open"
CLOSE_ACTION = "close"
OPEN_URL = "/"


def default_actions() -> list[NotificationAction]:
    return [
        NotificationAction(action=OPEN_ACTION, title="פתח", icon=ICON),
        NotificationAction(action=CLOSE_ACTION, title="סגור"),
    ]


def parse_push_payload(raw: bytes) -> dict[str, Any]:
    """Decode a push body into ``{title, body, data}``.

    Raises:
        InvalidPushPayloadError: If the body is not a JSON object with a string title
    """
    try:
        payload = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidPushPayloadError(f"Push payload is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise InvalidPushPayloadError("Push payload must be a JSON object")
    if not isinstance(payload.get("title"), str):
        raise InvalidPushPayloadError("Push payload requires a string 'title'")
    return payload


class NotificationService:
    """Shows notifications for push messages and routes their clicks."""

    def __init__(self, clients: ClientRegistry) -> None:
        self._clients = clients
        self._notifications: dict[str, Notification] = {}

    def handle_push(self, raw: bytes | None) -> Notification | None:
        """Show a notification for a push message.

        Args:
            raw: The push body; empty means no payload

        Returns:
            The notification shown, or None when there was no payload

        Raises:
            InvalidPushPayloadError: If the payload is malformed
        """
        if not raw:
            return None

        payload = parse_push_payload(raw)
        notification = Notification(
            id=uuid.uuid4().hex,
            title=payload["title"],
            body=payload.get("body"),
            icon=ICON,
            badge=ICON,
            vibrate=list(VIBRATE_PATTERN),
            data=payload.get("data"),
            actions=default_actions(),
        )
        self._notifications[notification.id] = notification
        logger.info("Showing notification %s: %s", notification.id, notification.title)
        return notification

    def get(self, notification_id: str) -> Notification | None:
        return self._notifications.get(notification_id)

    def active(self) -> list[Notification]:
        return [n for n in self._notifications.values() if not n.closed]

    def handle_click(self, notification_id: str, action: str | None) -> OpenWindowCommand | None:
        """Close a clicked notification and run its action.

        Returns:
            The dispatched command, or None for actions that only close

        Raises:
            KeyError: If the notification is unknown
        """
        notification = self._notifications[notification_id]
        notification.close()

        if action != OPEN_ACTION:
            return None

        command = OpenWindowCommand(url=OPEN_URL)
        self._clients.dispatch(command)
        return command
