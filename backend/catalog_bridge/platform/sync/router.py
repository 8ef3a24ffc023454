"""Event router.

Subscribes to the host's catalog events and runs each one through the
resolve -> dispatch pipeline on the raising thread. The router holds no state
besides its subscriptions, so handlers may run concurrently for different
events.
"""

from typing import Dict, Optional

from catalog_bridge.core.logging import ContextualLogger
from catalog_bridge.core.logging import logger as default_logger
from catalog_bridge.platform.catalog.broadcaster import EventHandler, EventSource
from catalog_bridge.platform.catalog.events import (
    AssociationChangedEvent,
    CatalogEvent,
    CatalogEventKind,
    CreatedContentEvent,
    DeletingContentEvent,
    MovedContentEvent,
    PriceUpdatedEvent,
    PublishedContentEvent,
    RelationChangedEvent,
)
from catalog_bridge.platform.sync.actions.dispatcher import ExportDispatcher
from catalog_bridge.platform.sync.actions.resolver import CatalogEntityResolver
from catalog_bridge.platform.sync.actions.types import ResolvedSet


class CatalogEventRouter:
    """Routes host catalog events to the export pipeline.

    Lifecycle:
    1. initialize(event_source) registers one handler per event kind
    2. the host raises events; each handler resolves and dispatches
    3. uninitialize(event_source) removes the handlers on shutdown
    """

    def __init__(
        self,
        resolver: CatalogEntityResolver,
        dispatcher: ExportDispatcher,
        logger: Optional[ContextualLogger] = None,
    ):
        self._resolver = resolver
        self._dispatcher = dispatcher
        self.logger = logger or default_logger.with_context(component="router")
        self._initialized = False

        self._handlers: Dict[CatalogEventKind, EventHandler] = {
            CatalogEventKind.PRICE_UPDATED: self.on_price_updated,
            CatalogEventKind.ASSOCIATION_UPDATING: self.on_association_updating,
            CatalogEventKind.RELATION_UPDATED: self.on_relation_updated,
            CatalogEventKind.CONTENT_CREATED: self.on_created_content,
            CatalogEventKind.CONTENT_DELETING: self.on_deleting_content,
            CatalogEventKind.CONTENT_MOVED: self.on_moved_content,
            CatalogEventKind.CONTENT_PUBLISHED: self.on_published_content,
        }

    @property
    def initialized(self) -> bool:
        """Check if the router is subscribed to an event source."""
        return self._initialized

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def initialize(self, event_source: EventSource) -> None:
        """Subscribe all handlers to the host's events."""
        if self._initialized:
            self.logger.warning("[Router] Already initialized, ignoring")
            return

        for kind, handler in self._handlers.items():
            event_source.subscribe(kind, handler)
        self._initialized = True
        self.logger.info(f"[Router] Subscribed to {len(self._handlers)} catalog events")

    def uninitialize(self, event_source: EventSource) -> None:
        """Unsubscribe all handlers from the host's events."""
        if not self._initialized:
            self.logger.warning("[Router] Not initialized, ignoring")
            return

        for kind, handler in self._handlers.items():
            event_source.unsubscribe(kind, handler)
        self._initialized = False
        self.logger.info("[Router] Unsubscribed from catalog events")

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------

    def on_association_updating(self, event: AssociationChangedEvent) -> None:
        """Handle associations being updated."""
        self.logger.debug("[Router] Association updating event raised")
        self.handle(event)

    def on_relation_updated(self, event: RelationChangedEvent) -> None:
        """Handle updated catalog relations."""
        self.logger.debug("[Router] Relation updated event raised")
        self.handle(event)

    def on_created_content(self, event: CreatedContentEvent) -> None:
        """Handle created content."""
        self.logger.debug("[Router] Content created event raised")
        self.handle(event)

    def on_deleting_content(self, event: DeletingContentEvent) -> None:
        """Handle content about to be deleted."""
        self.logger.debug("[Router] Content deleting event raised")
        self.handle(event)

    def on_moved_content(self, event: MovedContentEvent) -> None:
        """Handle moved content."""
        self.logger.debug("[Router] Content moved event raised")
        self.handle(event)

    def on_published_content(self, event: PublishedContentEvent) -> None:
        """Handle published content."""
        self.logger.debug("[Router] Content published event raised")
        self.handle(event)

    def on_price_updated(self, event: PriceUpdatedEvent) -> None:
        """Handle updated prices."""
        self.logger.debug("[Router] Price updated event raised")
        self.handle(event)

    def handle(self, event: CatalogEvent) -> ResolvedSet:
        """Resolve and export a single event.

        Returns:
            The resolved set of the event.

        Raises:
            Any resolution or export failure, after logging it
        """
        event_logger = self.logger.with_context(event_kind=event.kind.value)
        try:
            resolved = self._resolver.resolve(event)
            if resolved.is_empty:
                event_logger.debug("[Router] Event affects no catalog entities")
                return resolved

            self._dispatcher.dispatch(resolved)
        except Exception as e:
            event_logger.error(f"[Router] Export for {event.kind.value} failed: {e}", exc_info=True)
            raise

        return resolved
