"""Protocols for the host content graph.

The bridge never talks to the commerce host directly. Content loading,
relation queries and key conversion go through a ContentGraphProvider, and the
host's object cache is reached through ObjectCache. Both are injected by the
hosting process.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Protocol, Sequence, Union, runtime_checkable

from catalog_bridge.platform.catalog.content import ContentReference

INVARIANT_CULTURE = ""


class CatalogContentType(str, Enum):
    """Kinds of catalog objects a business key can be converted from."""

    CATALOG = "catalog"
    CATALOG_NODE = "catalog_node"
    CATALOG_ENTRY = "catalog_entry"


class RelationKind(str, Enum):
    """Directed relation kinds between catalog content."""

    PRODUCT_VARIATION = "product_variation"  # parent=product, child=variation
    NODE_ENTRY = "node_entry"  # parent=node, child=entry
    NODE_NODE = "node_node"  # parent=node, child=node


@dataclass(frozen=True)
class Relation:
    """Directed edge between two content items."""

    parent: ContentReference
    child: ContentReference
    kind: RelationKind
    sort_order: int = 0


@dataclass(frozen=True)
class Association:
    """Cross-sell/up-sell link from one entry to another."""

    source: ContentReference
    target: ContentReference
    group: str = "default"
    association_type: str = "default"


@runtime_checkable
class ContentGraphProvider(Protocol):
    """Read access to the host content graph.

    Contract:
    - get_items returns loaded items in no particular order and silently omits
      references that cannot be loaded
    - Loaded items are CatalogContent instances for catalog data; anything else
      is non-catalog content
    - All calls are synchronous and may be slow; the bridge imposes no timeout
    """

    def try_get(
        self, reference: ContentReference, culture: str = INVARIANT_CULTURE
    ) -> Optional[Any]:
        """Load a single content item, or None if it does not exist."""
        ...

    def get_items(
        self, references: Iterable[ContentReference], culture: str = INVARIANT_CULTURE
    ) -> Sequence[Any]:
        """Batch-load content items."""
        ...

    def get_parents(self, reference: ContentReference, kind: RelationKind) -> Sequence[Relation]:
        """Get relations of the given kind in which reference is the child."""
        ...

    def get_children(self, reference: ContentReference, kind: RelationKind) -> Sequence[Relation]:
        """Get relations of the given kind in which reference is the parent."""
        ...

    def get_associations(self, reference: ContentReference) -> Sequence[Association]:
        """Get the associations of an entry."""
        ...

    def get_root_nodes(self) -> Sequence[ContentReference]:
        """Get references to the top-level nodes of all catalogs."""
        ...

    def convert_key_to_reference(
        self,
        key: Union[int, str],
        content_type: CatalogContentType = CatalogContentType.CATALOG_ENTRY,
        version: int = 0,
    ) -> Optional[ContentReference]:
        """Convert a business key (database id or entry code) to a content reference."""
        ...


@runtime_checkable
class ObjectCache(Protocol):
    """The host's object instance cache."""

    def remove(self, key: str) -> None:
        """Remove a cache entry."""
        ...
