"""Host event source.

The router registers its handlers through an EventSource for the lifetime of
the bridge. CatalogEventBroadcaster is an in-process implementation for hosts
that push events into the bridge themselves.
"""

from collections import defaultdict
from typing import Callable, DefaultDict, List, Optional, Protocol, runtime_checkable

from catalog_bridge.core.logging import ContextualLogger
from catalog_bridge.core.logging import logger as default_logger
from catalog_bridge.platform.catalog.events import CatalogEvent, CatalogEventKind

EventHandler = Callable[[CatalogEvent], None]


@runtime_checkable
class EventSource(Protocol):
    """Registration surface of the host's events."""

    def subscribe(self, kind: CatalogEventKind, handler: EventHandler) -> None:
        """Register a handler for an event kind."""
        ...

    def unsubscribe(self, kind: CatalogEventKind, handler: EventHandler) -> None:
        """Remove a previously registered handler."""
        ...


class CatalogEventBroadcaster:
    """Synchronous in-process event source.

    Handlers run on the raising thread, in registration order. Exceptions
    raised by a handler propagate to the caller of raise_event and stop
    delivery to the remaining handlers.
    """

    def __init__(self, logger: Optional[ContextualLogger] = None):
        self._handlers: DefaultDict[CatalogEventKind, List[EventHandler]] = defaultdict(list)
        self.logger = logger or default_logger.with_context(component="broadcaster")

    def subscribe(self, kind: CatalogEventKind, handler: EventHandler) -> None:
        """Register a handler for an event kind; handlers run in registration order."""
        self._handlers[kind].append(handler)

    def unsubscribe(self, kind: CatalogEventKind, handler: EventHandler) -> None:
        """Remove a handler; unknown handlers are ignored."""
        handlers = self._handlers.get(kind)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def handler_count(self, kind: CatalogEventKind) -> int:
        """Get the number of handlers registered for an event kind."""
        return len(self._handlers.get(kind, ()))

    def raise_event(self, event: CatalogEvent) -> None:
        """Deliver an event to all handlers registered for its kind."""
        handlers = list(self._handlers.get(event.kind, ()))
        if not handlers:
            self.logger.debug(f"[Broadcaster] No handlers for {event.kind.value}")
            return

        for handler in handlers:
            handler(event)
