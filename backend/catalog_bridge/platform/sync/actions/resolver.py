"""Entity resolver for host change events.

Maps a raw host event to the business entities that must be re-exported:
products, their variations, their parent products and catalog nodes. The
resolver only reads from the content graph; it never exports anything.
"""

from typing import Any, Iterable, List, Optional

from catalog_bridge.core.logging import ContextualLogger
from catalog_bridge.core.logging import logger as default_logger
from catalog_bridge.platform.catalog import relations
from catalog_bridge.platform.catalog.content import (
    CatalogContent,
    ContentReference,
    EntryContent,
    NodeContent,
    ProductContent,
    VariationContent,
    is_null_or_empty,
)
from catalog_bridge.platform.catalog.events import (
    AssociationChangedEvent,
    CatalogEvent,
    ContentEvent,
    CreatedContentEvent,
    DeletingContentEvent,
    MovedContentEvent,
    PriceUpdatedEvent,
    PublishedContentEvent,
    RelationChangedEvent,
)
from catalog_bridge.platform.catalog.graph import (
    INVARIANT_CULTURE,
    CatalogContentType,
    ContentGraphProvider,
)
from catalog_bridge.platform.catalog.identity import ContentSet, ReferenceSet
from catalog_bridge.platform.sync.actions.types import ResolvedSet
from catalog_bridge.platform.sync.exceptions import EntityResolutionError, UnsupportedEventError


class CatalogEntityResolver:
    """Resolves host change events to affected catalog entities.

    Resolution per event:
    - AssociationChanged: owning entries of the changes, products only
    - RelationChanged: entry-level changes -> products,
      node-level changes -> nodes (and the category structure changed)
    - Created (copy only), Moved, Published: entry -> affected products,
      node -> the node itself
    - Deleting: entry -> the entry plus the variations of a product,
      node -> the node itself
    - PriceUpdated: entry codes -> products by the price-change rule
    """

    def __init__(self, graph: ContentGraphProvider, logger: Optional[ContextualLogger] = None):
        """Initialize resolver.

        Args:
            graph: Read access to the host content graph
            logger: Optional contextual logger
        """
        self._graph = graph
        self.logger = logger or default_logger.with_context(component="resolver")

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def resolve(self, event: CatalogEvent) -> ResolvedSet:
        """Resolve an event to the entities it affects.

        Args:
            event: Host change event

        Returns:
            ResolvedSet with de-duplicated entities; empty when nothing in the
            catalog domain is affected.

        Raises:
            UnsupportedEventError: If the event type is unknown
            EntityResolutionError: If a price change cannot be mapped to a product
        """
        if isinstance(event, AssociationChangedEvent):
            return self._resolve_association_changes(event)
        if isinstance(event, RelationChangedEvent):
            return self._resolve_relation_changes(event)
        if isinstance(event, CreatedContentEvent):
            return self._resolve_created(event)
        if isinstance(event, DeletingContentEvent):
            return self._resolve_deleting(event)
        if isinstance(event, (MovedContentEvent, PublishedContentEvent)):
            return self._resolve_moved_or_published(event)
        if isinstance(event, PriceUpdatedEvent):
            return self._resolve_price_updates(event)

        raise UnsupportedEventError(f"No resolution rules for event {type(event).__name__}")

    def get_products_affected(self, entry: EntryContent) -> List[ProductContent]:
        """Get the products to export when an entry changes.

        A variation resolves to all of its parent products; a product resolves
        to itself.
        """
        return list(relations.products_for_entry(self._graph, entry))

    def get_entries_affected(
        self,
        entry: EntryContent,
        include_parent_products: bool,
        include_child_variants: bool,
    ) -> List[EntryContent]:
        """Get the entries affected by a change to an entry.

        Args:
            entry: The changed entry
            include_parent_products: For a variation, add its parent products
            include_child_variants: For a product, add its variations

        Returns:
            Unique loaded entries. A product is always part of its own result;
            a variation is never part of its own result.
        """
        links = ReferenceSet()

        if isinstance(entry, VariationContent):
            if include_parent_products:
                for link in relations.parent_product_links(self._graph, entry.content_link):
                    links.add(link)
        elif isinstance(entry, ProductContent):
            if include_child_variants:
                for link in relations.child_variation_links(self._graph, entry.content_link):
                    links.add(link)
            links.add(entry.content_link)

        if not links:
            return []

        entries = ContentSet(
            item
            for item in self._graph.get_items(links, INVARIANT_CULTURE)
            if isinstance(item, EntryContent)
        )
        return list(entries)

    def get_products_affected_by_price_changes(
        self, content_links: Iterable[Optional[ContentReference]]
    ) -> List[ProductContent]:
        """Get the products to export after price changes.

        Variations resolve to their parent products. A product resolves to the
        product loaded from its parent link, not to itself; callers depending on
        price exports of products without variations should be aware of this.

        Raises:
            EntityResolutionError: If a changed product's parent link does not
                load as a product
        """
        changed_links = ReferenceSet(
            link for link in content_links if not is_null_or_empty(link)
        )
        if not changed_links:
            return []

        products: ContentSet[ProductContent] = ContentSet()

        for content in self._graph.get_items(changed_links, INVARIANT_CULTURE):
            if isinstance(content, VariationContent):
                products.update(relations.parent_products(self._graph, content))
            elif isinstance(content, ProductContent):
                products.add(self._load_product_parent(content))

        return list(products)

    # -------------------------------------------------------------------------
    # Catalog events
    # -------------------------------------------------------------------------

    def _resolve_association_changes(self, event: AssociationChangedEvent) -> ResolvedSet:
        links = ReferenceSet(
            self._entry_link(change.parent_entry_id) for change in event.changes
        )
        return ResolvedSet(
            event_kind=event.kind,
            products=list(relations.load_products(self._graph, links)),
        )

    def _resolve_relation_changes(self, event: RelationChangedEvent) -> ResolvedSet:
        resolved = ResolvedSet(event_kind=event.kind)

        if event.has_entry_changes:
            entry_links = ReferenceSet()
            for change in event.entry_relation_changes:
                entry_links.add(self._entry_link(change.parent_entry_id))
            for change in event.node_entry_relation_changes:
                entry_links.add(self._entry_link(change.entry_id))
            resolved.products = list(relations.load_products(self._graph, entry_links))

        if event.has_node_changes:
            node_links = ReferenceSet(
                self._graph.convert_key_to_reference(
                    change.child_node_id, CatalogContentType.CATALOG_NODE, 0
                )
                for change in event.node_relation_changes
            )
            nodes = ContentSet(relations.load_nodes(self._graph, node_links))
            resolved.nodes = list(nodes)
            resolved.category_structure_changed = True

        return resolved

    # -------------------------------------------------------------------------
    # Content events
    # -------------------------------------------------------------------------

    def _resolve_created(self, event: CreatedContentEvent) -> ResolvedSet:
        if not event.is_copy:
            self.logger.debug("[Resolver] Created content is not a copy action, skipping")
            return ResolvedSet(event_kind=event.kind)

        content = self._load_catalog_content(event.content_link)
        if content is None:
            return ResolvedSet(event_kind=event.kind)

        return self._resolve_entry_or_node(event, content)

    def _resolve_deleting(self, event: DeletingContentEvent) -> ResolvedSet:
        content = self._load_catalog_content(event.content_link)

        if isinstance(content, EntryContent):
            entries = self.get_entries_affected(
                content, include_parent_products=False, include_child_variants=True
            )
            # A variation is not part of its own affected entries
            if isinstance(content, VariationContent) and not entries:
                entries = [content]
            return ResolvedSet(event_kind=event.kind, entries=entries)
        if isinstance(content, NodeContent):
            return ResolvedSet(event_kind=event.kind, nodes=[content])

        return ResolvedSet(event_kind=event.kind)

    def _resolve_moved_or_published(self, event: ContentEvent) -> ResolvedSet:
        content = getattr(event, "content", None)
        if not isinstance(content, CatalogContent):
            content = self._load_catalog_content(event.content_link)
        if content is None:
            return ResolvedSet(event_kind=event.kind)

        return self._resolve_entry_or_node(event, content)

    def _resolve_entry_or_node(self, event: ContentEvent, content: CatalogContent) -> ResolvedSet:
        if isinstance(content, EntryContent):
            return ResolvedSet(
                event_kind=event.kind, products=self.get_products_affected(content)
            )
        if isinstance(content, NodeContent):
            return ResolvedSet(event_kind=event.kind, nodes=[content])

        return ResolvedSet(event_kind=event.kind)

    # -------------------------------------------------------------------------
    # Catalog key events
    # -------------------------------------------------------------------------

    def _resolve_price_updates(self, event: PriceUpdatedEvent) -> ResolvedSet:
        links = [
            self._graph.convert_key_to_reference(key.catalog_entry_code)
            for key in event.catalog_keys
        ]
        return ResolvedSet(
            event_kind=event.kind,
            products=self.get_products_affected_by_price_changes(links),
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _entry_link(self, entry_id: int) -> Optional[ContentReference]:
        return self._graph.convert_key_to_reference(
            entry_id, CatalogContentType.CATALOG_ENTRY, 0
        )

    def _load_catalog_content(
        self, content_link: Optional[ContentReference]
    ) -> Optional[CatalogContent]:
        """Load a content reference, returning None for anything outside the catalog."""
        if is_null_or_empty(content_link):
            self.logger.debug("[Resolver] Event has no content reference")
            return None

        content: Any = self._graph.try_get(content_link, INVARIANT_CULTURE)
        if not isinstance(content, CatalogContent):
            self.logger.debug(f"[Resolver] Content {content_link} is not catalog content")
            return None

        return content

    def _load_product_parent(self, product: ProductContent) -> ProductContent:
        parent = None
        if not is_null_or_empty(product.parent_link):
            parent = self._graph.try_get(product.parent_link, INVARIANT_CULTURE)

        if not isinstance(parent, ProductContent):
            raise EntityResolutionError(
                f"Parent {product.parent_link} of product {product.code} is not a product"
            )

        return parent
