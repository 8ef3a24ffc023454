"""Product export service.

Builds Ka-ching payloads for products, their assets and recommendations and
sends them through the export sink.
"""

from typing import Any, Iterable, List, Optional

from catalog_bridge.core.config import Settings
from catalog_bridge.core.config import settings as default_settings
from catalog_bridge.core.logging import ContextualLogger
from catalog_bridge.core.logging import logger as default_logger
from catalog_bridge.platform.catalog import relations
from catalog_bridge.platform.catalog.content import (
    EntryContent,
    NodeContent,
    ProductContent,
    VariationContent,
)
from catalog_bridge.platform.catalog.graph import (
    INVARIANT_CULTURE,
    ContentGraphProvider,
    RelationKind,
)
from catalog_bridge.platform.catalog.identity import ContentSet, ReferenceSet
from catalog_bridge.platform.http_client.export_client import ExportSink
from catalog_bridge.schemas.kaching import (
    ProductAssetsImport,
    ProductAssetsPayload,
    ProductPayload,
    ProductsImport,
    ProductVariantPayload,
    RecommendationPayload,
    RecommendationsImport,
)


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


class ProductExportService:
    """Exports and deletes products at the Ka-ching import API."""

    def __init__(
        self,
        graph: ContentGraphProvider,
        sink: ExportSink,
        settings: Optional[Settings] = None,
        logger: Optional[ContextualLogger] = None,
    ):
        self._graph = graph
        self._sink = sink
        self._settings = settings or default_settings
        self.logger = logger or default_logger.with_context(component="product_export")

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def export_product(self, product: ProductContent) -> int:
        """Create or update a product including its variants."""
        payload = self.build_product_payload(product)
        self.logger.with_context(product_code=product.code).info(
            f"Exporting product {product.code}"
        )
        return self._sink.post(
            ProductsImport(products=[payload]), self._settings.KACHING_PRODUCTS_URL
        )

    def export_product_assets(self, products: Iterable[ProductContent]) -> Optional[int]:
        """Send the asset lists of products. Returns None if there is nothing to send."""
        assets = [
            ProductAssetsPayload(product_id=product.code, urls=list(product.assets))
            for product in products
        ]
        if not assets:
            return None

        return self._sink.post(
            ProductAssetsImport(assets=assets), self._settings.KACHING_PRODUCT_ASSETS_URL
        )

    def export_product_recommendations(
        self, products: Iterable[ProductContent]
    ) -> Optional[int]:
        """Send the associations of products as recommendations.

        Associations are read from the graph at call time, so the host's cached
        association list must be current.
        """
        recommendations = [
            RecommendationPayload(
                product_id=product.code, recommendations=self._recommended_codes(product)
            )
            for product in products
        ]
        if not recommendations:
            return None

        return self._sink.post(
            RecommendationsImport(recommendations=recommendations),
            self._settings.KACHING_RECOMMENDATIONS_URL,
        )

    def export_child_products(self, node: NodeContent) -> List[int]:
        """Re-export every product linked below a node.

        Variations linked to the node export their parent products instead.
        """
        products: ContentSet[ProductContent] = ContentSet()
        for entry in relations.child_entries(self._graph, node):
            products.update(relations.products_for_entry(self._graph, entry))

        self.logger.with_context(node_code=node.code).info(
            f"Exporting {len(products)} products below node {node.code}"
        )
        return [self.export_product(product) for product in products]

    # -------------------------------------------------------------------------
    # Delete
    # -------------------------------------------------------------------------

    def delete_products(self, entries: Iterable[EntryContent]) -> Optional[int]:
        """Delete entries from the remote product list."""
        return self._delete(entries, self._settings.KACHING_PRODUCTS_URL)

    def delete_product_assets(self, entries: Iterable[EntryContent]) -> Optional[int]:
        """Delete the remote assets of entries."""
        return self._delete(entries, self._settings.KACHING_PRODUCT_ASSETS_URL)

    def delete_product_recommendations(self, entries: Iterable[EntryContent]) -> Optional[int]:
        """Delete the remote recommendations of entries."""
        return self._delete(entries, self._settings.KACHING_RECOMMENDATIONS_URL)

    def delete_child_products(self, node: NodeContent) -> Optional[int]:
        """Delete every entry linked below a node, including variations of its products."""
        entries: ContentSet[EntryContent] = ContentSet()
        for entry in relations.child_entries(self._graph, node):
            entries.add(entry)
            if isinstance(entry, ProductContent):
                entries.update(relations.child_variations(self._graph, entry))

        self.logger.with_context(node_code=node.code).info(
            f"Deleting {len(entries)} entries below node {node.code}"
        )
        return self.delete_products(entries)

    # -------------------------------------------------------------------------
    # Payloads
    # -------------------------------------------------------------------------

    def build_product_payload(self, product: ProductContent) -> ProductPayload:
        """Build the import payload of a product."""
        variants = [
            self._build_variant_payload(variation)
            for variation in relations.child_variations(self._graph, product)
        ]
        return ProductPayload(
            id=product.code,
            name=product.display_name or product.name,
            description=product.properties.get("description"),
            barcode=product.properties.get("barcode"),
            retail_price=_optional_float(product.properties.get("retail_price")),
            image_url=product.assets[0] if product.assets else None,
            tags=self._category_tags(product) or None,
            variants=variants or None,
        )

    def _build_variant_payload(self, variation: VariationContent) -> ProductVariantPayload:
        return ProductVariantPayload(
            id=variation.code,
            name=variation.display_name or variation.name,
            barcode=variation.properties.get("barcode"),
            retail_price=_optional_float(variation.properties.get("retail_price")),
            image_url=variation.assets[0] if variation.assets else None,
        )

    def _category_tags(self, product: ProductContent) -> dict:
        node_links = ReferenceSet(
            relation.parent
            for relation in self._graph.get_parents(product.content_link, RelationKind.NODE_ENTRY)
        )
        return {node.code: True for node in relations.load_nodes(self._graph, node_links)}

    def _recommended_codes(self, product: ProductContent) -> List[str]:
        targets = ReferenceSet(
            association.target for association in self._graph.get_associations(product.content_link)
        )
        if not targets:
            return []

        by_identity = {
            item.content_link.identity: item.code
            for item in self._graph.get_items(targets, INVARIANT_CULTURE)
            if isinstance(item, EntryContent)
        }
        return [by_identity[link.identity] for link in targets if link.identity in by_identity]

    def _delete(self, entries: Iterable[EntryContent], url: str) -> Optional[int]:
        ids = [entry.code for entry in entries]
        if not ids:
            return None
        return self._sink.delete(ids, url)
