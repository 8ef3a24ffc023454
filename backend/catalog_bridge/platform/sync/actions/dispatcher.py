"""Export dispatcher.

Plans export actions for a resolved event and executes them, in order,
against the product and category export services.
"""

from typing import Callable, Dict, List, Optional

from catalog_bridge.core.config import Settings
from catalog_bridge.core.config import settings as default_settings
from catalog_bridge.core.exceptions import ExportTransportError
from catalog_bridge.core.logging import ContextualLogger
from catalog_bridge.core.logging import logger as default_logger
from catalog_bridge.platform.catalog.events import CatalogEventKind
from catalog_bridge.platform.catalog.graph import ObjectCache
from catalog_bridge.platform.exporters.categories import CategoryExportService
from catalog_bridge.platform.exporters.products import ProductExportService
from catalog_bridge.platform.sync.actions.types import (
    DeleteChildProducts,
    DeleteProductAssets,
    DeleteProductRecommendations,
    DeleteProducts,
    ExportAction,
    ExportActionType,
    ExportChildProducts,
    ExportProduct,
    ExportProductAssets,
    ExportProductRecommendations,
    InvalidateAssociationCache,
    ResolvedSet,
    StartFullCategoryExport,
)
from catalog_bridge.platform.sync.exceptions import ExportDispatchError


class ExportDispatcher:
    """Maps resolved events to export actions and executes them.

    Mapping (event kind -> actions):
    - association updating: per product, invalidate the cached association
      list, then export recommendations of all products
    - relation updated: export each product; for node changes, export the
      child products of each node, then one full category export
    - created (copy): products -> export each, then assets and
      recommendations; node -> full category export
    - deleting: entries -> delete products, assets and recommendations;
      node -> delete child products, then full category export
    - moved: products -> export each; node -> export child products, then
      full category export
    - published: products -> export each, then assets and recommendations;
      node -> full category export
    - price updated: export each product

    Execution is sequential and stops at the first failure.
    """

    def __init__(
        self,
        product_exporter: ProductExportService,
        category_exporter: CategoryExportService,
        cache: ObjectCache,
        settings: Optional[Settings] = None,
        logger: Optional[ContextualLogger] = None,
    ):
        """Initialize dispatcher.

        Args:
            product_exporter: Service exporting products, assets and recommendations
            category_exporter: Service exporting the category structure
            cache: Host object cache, for the association list workaround
            settings: Optional settings, defaults to the global settings
            logger: Optional contextual logger
        """
        self._product_exporter = product_exporter
        self._category_exporter = category_exporter
        self._cache = cache
        self._settings = settings or default_settings
        self.logger = logger or default_logger.with_context(component="dispatcher")

        self._planners: Dict[CatalogEventKind, Callable[[ResolvedSet], List[ExportAction]]] = {
            CatalogEventKind.ASSOCIATION_UPDATING: self._plan_association_updating,
            CatalogEventKind.RELATION_UPDATED: self._plan_relation_updated,
            CatalogEventKind.CONTENT_CREATED: self._plan_created,
            CatalogEventKind.CONTENT_DELETING: self._plan_deleting,
            CatalogEventKind.CONTENT_MOVED: self._plan_moved,
            CatalogEventKind.CONTENT_PUBLISHED: self._plan_published,
            CatalogEventKind.PRICE_UPDATED: self._plan_price_updated,
        }
        self._executors: Dict[ExportActionType, Callable[[ExportAction], None]] = {
            ExportActionType.INVALIDATE_ASSOCIATION_CACHE: self._invalidate_association_cache,
            ExportActionType.EXPORT_PRODUCT: lambda a: self._product_exporter.export_product(
                a.product
            ),
            ExportActionType.EXPORT_PRODUCT_ASSETS: lambda a: (
                self._product_exporter.export_product_assets(a.products)
            ),
            ExportActionType.EXPORT_PRODUCT_RECOMMENDATIONS: lambda a: (
                self._product_exporter.export_product_recommendations(a.products)
            ),
            ExportActionType.DELETE_PRODUCTS: lambda a: self._product_exporter.delete_products(
                a.entries
            ),
            ExportActionType.DELETE_PRODUCT_ASSETS: lambda a: (
                self._product_exporter.delete_product_assets(a.entries)
            ),
            ExportActionType.DELETE_PRODUCT_RECOMMENDATIONS: lambda a: (
                self._product_exporter.delete_product_recommendations(a.entries)
            ),
            ExportActionType.EXPORT_CHILD_PRODUCTS: lambda a: (
                self._product_exporter.export_child_products(a.node)
            ),
            ExportActionType.DELETE_CHILD_PRODUCTS: lambda a: (
                self._product_exporter.delete_child_products(a.node)
            ),
            ExportActionType.START_FULL_CATEGORY_EXPORT: lambda a: (
                self._category_exporter.start_full_category_export()
            ),
        }

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def plan(self, resolved: ResolvedSet) -> List[ExportAction]:
        """Get the actions for a resolved event, in execution order."""
        planner = self._planners.get(resolved.event_kind)
        if planner is None:
            raise ExportDispatchError(f"No export mapping for {resolved.event_kind.value}")
        return planner(resolved)

    def dispatch(self, resolved: ResolvedSet) -> List[ExportAction]:
        """Plan and execute the actions for a resolved event.

        Args:
            resolved: Affected entities of one event

        Returns:
            The executed actions.

        Raises:
            ExportTransportError: If the export API fails
            ExportDispatchError: If an action fails for any other reason
        """
        actions = self.plan(resolved)
        if not actions:
            self.logger.debug(f"[Dispatcher] Nothing to export for {resolved.summary()}")
            return actions

        self.logger.debug(
            f"[Dispatcher] Dispatching {len(actions)} actions for {resolved.summary()}"
        )
        for action in actions:
            self._execute(action)

        return actions

    # -------------------------------------------------------------------------
    # Planning
    # -------------------------------------------------------------------------

    def _plan_association_updating(self, resolved: ResolvedSet) -> List[ExportAction]:
        if not resolved.products:
            return []

        # The host clears deleted associations from its cache only after the
        # event completes; drop the cached lists so the export reads fresh data.
        actions: List[ExportAction] = [
            InvalidateAssociationCache(product=product) for product in resolved.products
        ]
        actions.append(ExportProductRecommendations(products=list(resolved.products)))
        return actions

    def _plan_relation_updated(self, resolved: ResolvedSet) -> List[ExportAction]:
        actions: List[ExportAction] = [
            ExportProduct(product=product) for product in resolved.products
        ]
        if resolved.category_structure_changed:
            actions.extend(ExportChildProducts(node=node) for node in resolved.nodes)
            actions.append(StartFullCategoryExport())
        return actions

    def _plan_created(self, resolved: ResolvedSet) -> List[ExportAction]:
        if resolved.products:
            return self._full_product_export(resolved)
        if resolved.nodes:
            # A copied node has no children yet; only the structure changed
            return [StartFullCategoryExport()]
        return []

    def _plan_deleting(self, resolved: ResolvedSet) -> List[ExportAction]:
        if resolved.entries:
            entries = list(resolved.entries)
            return [
                DeleteProducts(entries=entries),
                DeleteProductAssets(entries=entries),
                DeleteProductRecommendations(entries=entries),
            ]
        if resolved.nodes:
            actions: List[ExportAction] = [
                DeleteChildProducts(node=node) for node in resolved.nodes
            ]
            actions.append(StartFullCategoryExport())
            return actions
        return []

    def _plan_moved(self, resolved: ResolvedSet) -> List[ExportAction]:
        if resolved.products:
            return [ExportProduct(product=product) for product in resolved.products]
        if resolved.nodes:
            actions: List[ExportAction] = [
                ExportChildProducts(node=node) for node in resolved.nodes
            ]
            actions.append(StartFullCategoryExport())
            return actions
        return []

    def _plan_published(self, resolved: ResolvedSet) -> List[ExportAction]:
        if resolved.products:
            return self._full_product_export(resolved)
        if resolved.nodes:
            return [StartFullCategoryExport()]
        return []

    def _plan_price_updated(self, resolved: ResolvedSet) -> List[ExportAction]:
        return [ExportProduct(product=product) for product in resolved.products]

    def _full_product_export(self, resolved: ResolvedSet) -> List[ExportAction]:
        """Product records first, then assets and recommendations referencing them."""
        products = list(resolved.products)
        actions: List[ExportAction] = [ExportProduct(product=product) for product in products]
        actions.append(ExportProductAssets(products=products))
        actions.append(ExportProductRecommendations(products=products))
        return actions

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def _execute(self, action: ExportAction) -> None:
        """Execute a single action with error wrapping.

        Raises:
            ExportTransportError: If the export API fails
            ExportDispatchError: If the action fails otherwise
        """
        self.logger.debug(f"[Dispatcher] Executing {action.describe()}")
        try:
            self._executors[action.action_type](action)
        except (ExportTransportError, ExportDispatchError):
            raise
        except Exception as e:
            self.logger.error(
                f"[Dispatcher] Action {action.describe()} failed: {e}", exc_info=True
            )
            raise ExportDispatchError(f"Action {action.describe()} failed: {e}") from e

    def _invalidate_association_cache(self, action: InvalidateAssociationCache) -> None:
        key = f"{self._settings.ASSOCIATION_CACHE_KEY_PREFIX}{action.product.content_link.id}"
        self._cache.remove(key)
        self.logger.debug(f"[Dispatcher] Removed cache entry {key}")
