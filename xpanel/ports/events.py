"""Port interface for supervisor control events."""

from typing import Protocol

from xpanel.domain.entities import SignalEvent


class EventSource(Protocol):
    """Blocking source of control events (e.g. queue.SimpleQueue)."""

    def get(self) -> SignalEvent:
        """Block until the next event arrives and return it."""
        ...


class EventSink(Protocol):
    """Destination for control events."""

    def put(self, item: SignalEvent) -> None:
        """Enqueue an event without blocking."""
        ...
