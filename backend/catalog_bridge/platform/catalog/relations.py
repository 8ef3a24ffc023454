"""Graph walks over catalog relations.

Shared by the entity resolver and the export services.
"""

from typing import List

from catalog_bridge.platform.catalog.content import (
    ContentReference,
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


def parent_product_links(
    graph: ContentGraphProvider, variation_link: ContentReference
) -> ReferenceSet:
    """Get references to all products a variation belongs to."""
    return ReferenceSet(
        relation.parent
        for relation in graph.get_parents(variation_link, RelationKind.PRODUCT_VARIATION)
    )


def child_variation_links(
    graph: ContentGraphProvider, product_link: ContentReference
) -> ReferenceSet:
    """Get references to all variations of a product."""
    return ReferenceSet(
        relation.child
        for relation in graph.get_children(product_link, RelationKind.PRODUCT_VARIATION)
    )


def load_products(graph: ContentGraphProvider, links: ReferenceSet) -> ContentSet[ProductContent]:
    """Batch-load references, keeping products only."""
    if not links:
        return ContentSet()
    return ContentSet(
        item
        for item in graph.get_items(links, INVARIANT_CULTURE)
        if isinstance(item, ProductContent)
    )


def parent_products(
    graph: ContentGraphProvider, variation: VariationContent
) -> ContentSet[ProductContent]:
    """Load the parent products of a variation.

    A variation ordinarily has exactly one parent product; abnormal data may
    link it to several.
    """
    return load_products(graph, parent_product_links(graph, variation.content_link))


def child_variations(
    graph: ContentGraphProvider, product: ProductContent
) -> List[VariationContent]:
    """Load the variations of a product, in relation order."""
    relations = sorted(
        graph.get_children(product.content_link, RelationKind.PRODUCT_VARIATION),
        key=lambda relation: relation.sort_order,
    )
    links = ReferenceSet(relation.child for relation in relations)
    if not links:
        return []

    by_identity = {
        item.content_link.identity: item
        for item in graph.get_items(links, INVARIANT_CULTURE)
        if isinstance(item, VariationContent)
    }
    return [by_identity[link.identity] for link in links if link.identity in by_identity]


def child_entries(graph: ContentGraphProvider, node: NodeContent) -> ContentSet[EntryContent]:
    """Load the entries linked directly below a node."""
    links = ReferenceSet(
        relation.child
        for relation in graph.get_children(node.content_link, RelationKind.NODE_ENTRY)
    )
    if not links:
        return ContentSet()
    return ContentSet(
        item for item in graph.get_items(links, INVARIANT_CULTURE) if isinstance(item, EntryContent)
    )


def child_nodes(graph: ContentGraphProvider, node_link: ContentReference) -> List[NodeContent]:
    """Load the nodes directly below a node, in relation order."""
    relations = sorted(
        graph.get_children(node_link, RelationKind.NODE_NODE),
        key=lambda relation: relation.sort_order,
    )
    return load_nodes(graph, ReferenceSet(relation.child for relation in relations))


def load_nodes(graph: ContentGraphProvider, links: ReferenceSet) -> List[NodeContent]:
    """Batch-load references as nodes, preserving the order of links."""
    if not links:
        return []

    by_identity = {
        item.content_link.identity: item
        for item in graph.get_items(links, INVARIANT_CULTURE)
        if isinstance(item, NodeContent)
    }
    return [by_identity[link.identity] for link in links if link.identity in by_identity]


def products_for_entry(
    graph: ContentGraphProvider, entry: EntryContent
) -> ContentSet[ProductContent]:
    """Get the products to export when an entry changes.

    Variations resolve to their parent products; products resolve to
    themselves; other entry types resolve to nothing.
    """
    if isinstance(entry, VariationContent):
        return parent_products(graph, entry)
    if isinstance(entry, ProductContent):
        return ContentSet([entry])
    return ContentSet()
