"""Tests for the in-process catalog event broadcaster."""

from unittest.mock import MagicMock

import pytest

from catalog_bridge.platform.catalog.broadcaster import CatalogEventBroadcaster, EventSource
from catalog_bridge.platform.catalog.events import (
    CatalogEventKind,
    DeletingContentEvent,
    PriceUpdatedEvent,
)


@pytest.fixture
def broadcaster(mock_logger):
    """Create an empty broadcaster."""
    return CatalogEventBroadcaster(logger=mock_logger)


def test_broadcaster_is_an_event_source(broadcaster):
    """Test that the broadcaster satisfies the EventSource protocol."""
    assert isinstance(broadcaster, EventSource)


def test_raise_event_delivers_to_handlers_of_kind(broadcaster):
    """Test that only handlers of the raised kind are called, in order."""
    manager = MagicMock()
    broadcaster.subscribe(CatalogEventKind.PRICE_UPDATED, manager.first)
    broadcaster.subscribe(CatalogEventKind.PRICE_UPDATED, manager.second)
    broadcaster.subscribe(CatalogEventKind.CONTENT_DELETING, manager.deleting)
    event = PriceUpdatedEvent()

    broadcaster.raise_event(event)

    assert [c[0] for c in manager.mock_calls] == ["first", "second"]
    manager.first.assert_called_once_with(event)


def test_raise_event_without_handlers_is_noop(broadcaster, mock_logger):
    """Test that events without subscribers are only logged."""
    broadcaster.raise_event(DeletingContentEvent())

    mock_logger.debug.assert_called_once()


def test_unsubscribe_removes_handler(broadcaster):
    """Test that an unsubscribed handler is no longer called."""
    handler = MagicMock()
    broadcaster.subscribe(CatalogEventKind.PRICE_UPDATED, handler)

    broadcaster.unsubscribe(CatalogEventKind.PRICE_UPDATED, handler)
    broadcaster.unsubscribe(CatalogEventKind.PRICE_UPDATED, handler)
    broadcaster.raise_event(PriceUpdatedEvent())

    handler.assert_not_called()
    assert broadcaster.handler_count(CatalogEventKind.PRICE_UPDATED) == 0


def test_handler_exception_propagates_and_stops_delivery(broadcaster):
    """Test that a failing handler raises to the caller of raise_event."""
    failing = MagicMock(side_effect=RuntimeError("export failed"))
    later = MagicMock()
    broadcaster.subscribe(CatalogEventKind.PRICE_UPDATED, failing)
    broadcaster.subscribe(CatalogEventKind.PRICE_UPDATED, later)

    with pytest.raises(RuntimeError, match="export failed"):
        broadcaster.raise_event(PriceUpdatedEvent())

    later.assert_not_called()
