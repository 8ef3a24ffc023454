"""Action dataclasses for the export pipeline.

A host event is resolved into a ResolvedSet of affected business entities.
The dispatcher plans a list of ExportActions from it; each action is a
first-class value naming the operation and the entities it applies to.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, List, Optional

from catalog_bridge.platform.catalog.content import EntryContent, NodeContent, ProductContent
from catalog_bridge.platform.catalog.events import CatalogEventKind


@dataclass
class ResolvedSet:
    """Affected entities of one host event.

    Only the fields relevant to the event kind are populated. Each list holds
    unique entities (see catalog.identity).
    """

    event_kind: CatalogEventKind
    products: List[ProductContent] = field(default_factory=list)
    nodes: List[NodeContent] = field(default_factory=list)
    entries: List[EntryContent] = field(default_factory=list)

    # Node-to-node relations changed; the category tree must be re-sent
    category_structure_changed: bool = False

    @property
    def is_empty(self) -> bool:
        """Check if the event affects nothing the bridge exports."""
        return not (
            self.products or self.nodes or self.entries or self.category_structure_changed
        )

    def summary(self) -> str:
        """Get a short description for logging."""
        return (
            f"{self.event_kind.value}: {len(self.products)} products, "
            f"{len(self.nodes)} nodes, {len(self.entries)} entries"
        )


class ExportActionType(str, Enum):
    """Operations the dispatcher can issue."""

    INVALIDATE_ASSOCIATION_CACHE = "invalidate_association_cache"
    EXPORT_PRODUCT = "export_product"
    EXPORT_PRODUCT_ASSETS = "export_product_assets"
    EXPORT_PRODUCT_RECOMMENDATIONS = "export_product_recommendations"
    DELETE_PRODUCTS = "delete_products"
    DELETE_PRODUCT_ASSETS = "delete_product_assets"
    DELETE_PRODUCT_RECOMMENDATIONS = "delete_product_recommendations"
    EXPORT_CHILD_PRODUCTS = "export_child_products"
    DELETE_CHILD_PRODUCTS = "delete_child_products"
    START_FULL_CATEGORY_EXPORT = "start_full_category_export"


@dataclass
class ExportAction:
    """Base class for all export actions."""

    action_type: ClassVar[ExportActionType]

    def describe(self) -> str:
        """Get a short description for logging."""
        return self.action_type.value


@dataclass
class InvalidateAssociationCache(ExportAction):
    """Drop the host's cached association list of a product."""

    action_type: ClassVar[ExportActionType] = ExportActionType.INVALIDATE_ASSOCIATION_CACHE

    product: Optional[ProductContent] = None

    def describe(self) -> str:
        """Get a short description for logging."""
        return f"{self.action_type.value}({self.product.code})"


@dataclass
class ExportProduct(ExportAction):
    """Create or update a single product."""

    action_type: ClassVar[ExportActionType] = ExportActionType.EXPORT_PRODUCT

    product: Optional[ProductContent] = None

    def describe(self) -> str:
        """Get a short description for logging."""
        return f"{self.action_type.value}({self.product.code})"


@dataclass
class ExportProductAssets(ExportAction):
    """Send the assets of products."""

    action_type: ClassVar[ExportActionType] = ExportActionType.EXPORT_PRODUCT_ASSETS

    products: List[ProductContent] = field(default_factory=list)

    def describe(self) -> str:
        """Get a short description for logging."""
        return f"{self.action_type.value}({len(self.products)} products)"


@dataclass
class ExportProductRecommendations(ExportAction):
    """Send the recommendations (associations) of products."""

    action_type: ClassVar[ExportActionType] = ExportActionType.EXPORT_PRODUCT_RECOMMENDATIONS

    products: List[ProductContent] = field(default_factory=list)

    def describe(self) -> str:
        """Get a short description for logging."""
        return f"{self.action_type.value}({len(self.products)} products)"


@dataclass
class DeleteProducts(ExportAction):
    """Delete entries from the remote product list."""

    action_type: ClassVar[ExportActionType] = ExportActionType.DELETE_PRODUCTS

    entries: List[EntryContent] = field(default_factory=list)

    def describe(self) -> str:
        """Get a short description for logging."""
        return f"{self.action_type.value}({len(self.entries)} entries)"


@dataclass
class DeleteProductAssets(ExportAction):
    """Delete the remote assets of entries."""

    action_type: ClassVar[ExportActionType] = ExportActionType.DELETE_PRODUCT_ASSETS

    entries: List[EntryContent] = field(default_factory=list)

    def describe(self) -> str:
        """Get a short description for logging."""
        return f"{self.action_type.value}({len(self.entries)} entries)"


@dataclass
class DeleteProductRecommendations(ExportAction):
    """Delete the remote recommendations of entries."""

    action_type: ClassVar[ExportActionType] = ExportActionType.DELETE_PRODUCT_RECOMMENDATIONS

    entries: List[EntryContent] = field(default_factory=list)

    def describe(self) -> str:
        """Get a short description for logging."""
        return f"{self.action_type.value}({len(self.entries)} entries)"


@dataclass
class ExportChildProducts(ExportAction):
    """Re-export all products below a node."""

    action_type: ClassVar[ExportActionType] = ExportActionType.EXPORT_CHILD_PRODUCTS

    node: Optional[NodeContent] = None

    def describe(self) -> str:
        """Get a short description for logging."""
        return f"{self.action_type.value}({self.node.code})"


@dataclass
class DeleteChildProducts(ExportAction):
    """Delete all products below a node."""

    action_type: ClassVar[ExportActionType] = ExportActionType.DELETE_CHILD_PRODUCTS

    node: Optional[NodeContent] = None

    def describe(self) -> str:
        """Get a short description for logging."""
        return f"{self.action_type.value}({self.node.code})"


@dataclass
class StartFullCategoryExport(ExportAction):
    """Re-send the complete category structure."""

    action_type: ClassVar[ExportActionType] = ExportActionType.START_FULL_CATEGORY_EXPORT
