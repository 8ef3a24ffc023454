"""Catalog content model, host events and graph access."""

from catalog_bridge.platform.catalog.content import (
    CatalogContent,
    ContentKind,
    ContentReference,
    EntryContent,
    NodeContent,
    ProductContent,
    VariationContent,
    is_null_or_empty,
)
from catalog_bridge.platform.catalog.graph import (
    Association,
    CatalogContentType,
    ContentGraphProvider,
    ObjectCache,
    Relation,
    RelationKind,
)
from catalog_bridge.platform.catalog.identity import ContentSet, ReferenceSet

__all__ = [
    # Content
    "CatalogContent",
    "ContentKind",
    "ContentReference",
    "EntryContent",
    "NodeContent",
    "ProductContent",
    "VariationContent",
    "is_null_or_empty",
    # Graph
    "Association",
    "CatalogContentType",
    "ContentGraphProvider",
    "ObjectCache",
    "Relation",
    "RelationKind",
    # Identity
    "ContentSet",
    "ReferenceSet",
]
