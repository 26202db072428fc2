"""Window client entities."""

from dataclasses import dataclass


@dataclass
class WindowClient:
    """A browsing context (tab) the worker can control.

    Attributes:
        id: Client identifier
        url: URL the client currently shows
        focused: Whether the client has focus
        controller: Version tag of the worker controlling it, if any
    """

    id: str
    url: str
    focused: bool = False
    controller: str | None = None


@dataclass(frozen=True)
class OpenWindowCommand:
    """Command asking the client registry to open (and focus) a window."""

    url: str
