"""Tests for ExportDispatcher.

Tests action planning per event kind, execution order against the export
services and error wrapping.
"""

from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from catalog_bridge.core.config import settings
from catalog_bridge.core.exceptions import ExportTransportError
from catalog_bridge.platform.catalog.content import ContentReference, NodeContent, ProductContent
from catalog_bridge.platform.catalog.events import CatalogEventKind
from catalog_bridge.platform.exporters.categories import CategoryExportService
from catalog_bridge.platform.exporters.products import ProductExportService
from catalog_bridge.platform.sync.actions.dispatcher import ExportDispatcher
from catalog_bridge.platform.sync.actions.types import (
    DeleteChildProducts,
    DeleteProductAssets,
    DeleteProductRecommendations,
    DeleteProducts,
    ExportChildProducts,
    ExportProduct,
    ExportProductAssets,
    ExportProductRecommendations,
    InvalidateAssociationCache,
    ResolvedSet,
    StartFullCategoryExport,
)
from catalog_bridge.platform.sync.exceptions import ExportDispatchError


def _product(id: int, code: str) -> ProductContent:
    return ProductContent(
        content_link=ContentReference(id=id), content_guid=uuid4(), name=code, code=code
    )


def _node(id: int, code: str) -> NodeContent:
    return NodeContent(
        content_link=ContentReference(id=id), content_guid=uuid4(), name=code, code=code
    )


@pytest.fixture
def manager():
    """Create a parent mock recording calls of all collaborators in order."""
    return MagicMock()


@pytest.fixture
def product_exporter(manager):
    """Create a mock ProductExportService attached to the manager."""
    exporter = MagicMock(spec=ProductExportService)
    manager.attach_mock(exporter, "products")
    return exporter


@pytest.fixture
def category_exporter(manager):
    """Create a mock CategoryExportService attached to the manager."""
    exporter = MagicMock(spec=CategoryExportService)
    manager.attach_mock(exporter, "categories")
    return exporter


@pytest.fixture
def cache(manager, mock_cache):
    """Attach the mock host cache to the manager."""
    manager.attach_mock(mock_cache, "cache")
    return mock_cache


@pytest.fixture
def dispatcher(product_exporter, category_exporter, cache, mock_logger):
    """Create a dispatcher over mock services."""
    return ExportDispatcher(product_exporter, category_exporter, cache, logger=mock_logger)


def _call_names(manager):
    return [c[0] for c in manager.mock_calls]


# ---------------------------------------------------------------------------
# Association updating
# ---------------------------------------------------------------------------


def test_association_updating_invalidates_cache_before_recommendations(
    dispatcher, manager, cache, product_exporter
):
    """Test that cached association lists are dropped before recommendations are sent."""
    shirt, tie = _product(10, "SHIRT"), _product(11, "TIE")

    dispatcher.dispatch(
        ResolvedSet(event_kind=CatalogEventKind.ASSOCIATION_UPDATING, products=[shirt, tie])
    )

    assert _call_names(manager) == [
        "cache.remove",
        "cache.remove",
        "products.export_product_recommendations",
    ]
    cache.remove.assert_any_call(f"{settings.ASSOCIATION_CACHE_KEY_PREFIX}10")
    cache.remove.assert_any_call(f"{settings.ASSOCIATION_CACHE_KEY_PREFIX}11")
    product_exporter.export_product_recommendations.assert_called_once_with([shirt, tie])


def test_association_cache_key_uses_configured_prefix(
    product_exporter, category_exporter, cache, mock_logger
):
    """Test that the cache key prefix comes from settings."""
    custom = settings.model_copy(update={"ASSOCIATION_CACHE_KEY_PREFIX": "assoc:"})
    dispatcher = ExportDispatcher(
        product_exporter, category_exporter, cache, settings=custom, logger=mock_logger
    )

    dispatcher.dispatch(
        ResolvedSet(
            event_kind=CatalogEventKind.ASSOCIATION_UPDATING, products=[_product(7, "SHIRT")]
        )
    )

    cache.remove.assert_called_once_with("assoc:7")


# ---------------------------------------------------------------------------
# Relation updated
# ---------------------------------------------------------------------------


def test_relation_updated_with_products_exports_each(dispatcher):
    """Test that entry relation changes export each product only."""
    shirt, tie = _product(10, "SHIRT"), _product(11, "TIE")

    actions = dispatcher.plan(
        ResolvedSet(event_kind=CatalogEventKind.RELATION_UPDATED, products=[shirt, tie])
    )

    assert actions == [ExportProduct(product=shirt), ExportProduct(product=tie)]


def test_relation_updated_with_node_changes_exports_category_once(
    dispatcher, category_exporter, product_exporter
):
    """Test that several changed nodes trigger one full category export."""
    men, women = _node(2, "men"), _node(3, "women")

    dispatcher.dispatch(
        ResolvedSet(
            event_kind=CatalogEventKind.RELATION_UPDATED,
            nodes=[men, women],
            category_structure_changed=True,
        )
    )

    assert product_exporter.export_child_products.call_count == 2
    category_exporter.start_full_category_export.assert_called_once_with()


def test_relation_updated_structure_change_without_loaded_nodes(dispatcher):
    """Test that a structure change still re-sends the category tree."""
    actions = dispatcher.plan(
        ResolvedSet(event_kind=CatalogEventKind.RELATION_UPDATED, category_structure_changed=True)
    )

    assert actions == [StartFullCategoryExport()]


# ---------------------------------------------------------------------------
# Created and published
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "event_kind", [CatalogEventKind.CONTENT_CREATED, CatalogEventKind.CONTENT_PUBLISHED]
)
def test_products_export_records_before_assets_and_recommendations(
    dispatcher, manager, event_kind
):
    """Test that product records are sent before assets and recommendations."""
    shirt, polo = _product(10, "SHIRT"), _product(11, "POLO")

    dispatcher.dispatch(ResolvedSet(event_kind=event_kind, products=[shirt, polo]))

    assert _call_names(manager) == [
        "products.export_product",
        "products.export_product",
        "products.export_product_assets",
        "products.export_product_recommendations",
    ]


@pytest.mark.parametrize(
    "event_kind", [CatalogEventKind.CONTENT_CREATED, CatalogEventKind.CONTENT_PUBLISHED]
)
def test_node_triggers_full_category_export(dispatcher, event_kind):
    """Test that created or published nodes only re-send the category tree."""
    actions = dispatcher.plan(ResolvedSet(event_kind=event_kind, nodes=[_node(2, "men")]))

    assert actions == [StartFullCategoryExport()]


# ---------------------------------------------------------------------------
# Deleting
# ---------------------------------------------------------------------------


def test_deleting_entries_deletes_products_assets_and_recommendations(
    dispatcher, product_exporter
):
    """Test that each delete operation is called once with all entries."""
    entries = [_product(10, "SHIRT"), _product(11, "POLO")]

    actions = dispatcher.dispatch(
        ResolvedSet(event_kind=CatalogEventKind.CONTENT_DELETING, entries=entries)
    )

    assert actions == [
        DeleteProducts(entries=entries),
        DeleteProductAssets(entries=entries),
        DeleteProductRecommendations(entries=entries),
    ]
    product_exporter.delete_products.assert_called_once_with(entries)
    product_exporter.delete_product_assets.assert_called_once_with(entries)
    product_exporter.delete_product_recommendations.assert_called_once_with(entries)


def test_deleting_node_deletes_children_then_exports_categories(dispatcher, manager):
    """Test that node deletion removes child products before re-sending categories."""
    node = _node(2, "men")

    actions = dispatcher.dispatch(
        ResolvedSet(event_kind=CatalogEventKind.CONTENT_DELETING, nodes=[node])
    )

    assert actions == [DeleteChildProducts(node=node), StartFullCategoryExport()]
    assert _call_names(manager) == [
        "products.delete_child_products",
        "categories.start_full_category_export",
    ]


# ---------------------------------------------------------------------------
# Moved and price updated
# ---------------------------------------------------------------------------


def test_moved_products_export_each(dispatcher):
    """Test that moved products are exported without assets or recommendations."""
    shirt = _product(10, "SHIRT")

    actions = dispatcher.plan(
        ResolvedSet(event_kind=CatalogEventKind.CONTENT_MOVED, products=[shirt])
    )

    assert actions == [ExportProduct(product=shirt)]


def test_moved_node_exports_children_then_categories(dispatcher, manager, product_exporter):
    """Test that a moved node re-exports its products before the category tree."""
    node = _node(2, "men")

    dispatcher.dispatch(ResolvedSet(event_kind=CatalogEventKind.CONTENT_MOVED, nodes=[node]))

    assert _call_names(manager) == [
        "products.export_child_products",
        "categories.start_full_category_export",
    ]
    product_exporter.export_child_products.assert_called_once_with(node)


def test_price_updated_exports_each_product(dispatcher, product_exporter):
    """Test that price updates export products without assets or recommendations."""
    shirt = _product(10, "SHIRT")

    actions = dispatcher.dispatch(
        ResolvedSet(event_kind=CatalogEventKind.PRICE_UPDATED, products=[shirt])
    )

    assert actions == [ExportProduct(product=shirt)]
    product_exporter.export_product.assert_called_once_with(shirt)
    product_exporter.export_product_assets.assert_not_called()


# ---------------------------------------------------------------------------
# General behavior
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("event_kind", list(CatalogEventKind))
def test_empty_resolved_set_issues_no_calls(dispatcher, manager, event_kind):
    """Test that an empty resolved set results in no export calls."""
    actions = dispatcher.dispatch(ResolvedSet(event_kind=event_kind))

    assert actions == []
    assert manager.mock_calls == []


def test_action_descriptions_name_entities():
    """Test that action descriptions are usable in logs."""
    shirt = _product(10, "SHIRT")

    assert InvalidateAssociationCache(product=shirt).describe() == (
        "invalidate_association_cache(SHIRT)"
    )
    assert ExportProductAssets(products=[shirt]).describe() == "export_product_assets(1 products)"
    assert ExportChildProducts(node=_node(2, "men")).describe() == "export_child_products(men)"
    assert StartFullCategoryExport().describe() == "start_full_category_export"
    assert ExportProductRecommendations().describe() == (
        "export_product_recommendations(0 products)"
    )


def test_transport_error_propagates_and_stops_execution(dispatcher, product_exporter):
    """Test that a transport failure stops the remaining actions."""
    product_exporter.export_product.side_effect = ExportTransportError(
        "POST failed", method="POST", url=settings.KACHING_PRODUCTS_URL, status_code=500
    )

    with pytest.raises(ExportTransportError) as exc_info:
        dispatcher.dispatch(
            ResolvedSet(
                event_kind=CatalogEventKind.CONTENT_PUBLISHED, products=[_product(10, "SHIRT")]
            )
        )

    assert exc_info.value.status_code == 500
    product_exporter.export_product_assets.assert_not_called()
    product_exporter.export_product_recommendations.assert_not_called()


def test_unexpected_error_is_wrapped(dispatcher, category_exporter, mock_logger):
    """Test that failures other than transport errors are wrapped and logged."""
    category_exporter.start_full_category_export.side_effect = ValueError("bad node")

    with pytest.raises(ExportDispatchError) as exc_info:
        dispatcher.dispatch(
            ResolvedSet(event_kind=CatalogEventKind.CONTENT_PUBLISHED, nodes=[_node(2, "men")])
        )

    assert isinstance(exc_info.value.__cause__, ValueError)
    mock_logger.error.assert_called_once()


def test_unknown_event_kind_raises(dispatcher):
    """Test that an event kind without a mapping is rejected."""
    resolved = ResolvedSet(event_kind=CatalogEventKind.PRICE_UPDATED)
    dispatcher._planners.pop(CatalogEventKind.PRICE_UPDATED)

    with pytest.raises(ExportDispatchError):
        dispatcher.plan(resolved)
