"""Change events raised by the commerce host.

Events describe changes in host terms (entry ids, node ids, catalog keys,
content references) rather than business entities. The entity resolver turns
them into the affected products and nodes.
"""

from enum import Enum
from typing import Any, ClassVar, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from catalog_bridge.platform.catalog.content import ContentReference


class CatalogEventKind(str, Enum):
    """Enumeration of host events the bridge subscribes to."""

    ASSOCIATION_UPDATING = "catalog.association_updating"
    RELATION_UPDATED = "catalog.relation_updated"
    CONTENT_CREATED = "content.created"
    CONTENT_DELETING = "content.deleting"
    CONTENT_MOVED = "content.moved"
    CONTENT_PUBLISHED = "content.published"
    PRICE_UPDATED = "catalog_key.price_updated"


class CatalogEvent(BaseModel):
    """Base class for host change events."""

    kind: ClassVar[CatalogEventKind]

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)


# ---------------------------------------------------------------------------
# Catalog events
# ---------------------------------------------------------------------------


class AssociationChange(BaseModel):
    """An association of a catalog entry was added, changed or removed."""

    parent_entry_id: int = Field(..., description="Id of the entry owning the association.")
    child_entry_id: Optional[int] = Field(None, description="Id of the associated entry.")
    association_name: Optional[str] = Field(None, description="Association group name.")


class AssociationChangedEvent(CatalogEvent):
    """Raised while entry associations are being updated."""

    kind: ClassVar[CatalogEventKind] = CatalogEventKind.ASSOCIATION_UPDATING

    changes: List[AssociationChange] = Field(default_factory=list)


class EntryRelationChange(BaseModel):
    """A relation between two entries changed (e.g. product to variation)."""

    parent_entry_id: int
    child_entry_id: int


class NodeEntryRelationChange(BaseModel):
    """An entry was linked to or unlinked from a node."""

    node_id: int
    entry_id: int


class NodeRelationChange(BaseModel):
    """A node was linked to or unlinked from another node."""

    parent_node_id: int
    child_node_id: int


class RelationChangedEvent(CatalogEvent):
    """Raised after catalog relations were updated."""

    kind: ClassVar[CatalogEventKind] = CatalogEventKind.RELATION_UPDATED

    entry_relation_changes: List[EntryRelationChange] = Field(default_factory=list)
    node_entry_relation_changes: List[NodeEntryRelationChange] = Field(default_factory=list)
    node_relation_changes: List[NodeRelationChange] = Field(default_factory=list)

    @property
    def has_entry_changes(self) -> bool:
        """Check if any change concerns catalog entries."""
        return bool(self.entry_relation_changes or self.node_entry_relation_changes)

    @property
    def has_node_changes(self) -> bool:
        """Check if any change concerns the node structure."""
        return bool(self.node_relation_changes)


# ---------------------------------------------------------------------------
# Content events
# ---------------------------------------------------------------------------


class ContentEvent(CatalogEvent):
    """Base class for events about a single content item."""

    content_link: Optional[ContentReference] = Field(
        None, description="Reference to the affected content."
    )


class CreatedContentEvent(ContentEvent):
    """Raised after content was created."""

    kind: ClassVar[CatalogEventKind] = CatalogEventKind.CONTENT_CREATED

    is_copy: bool = Field(False, description="Whether the content was created by copy/duplicate.")


class DeletingContentEvent(ContentEvent):
    """Raised before content is deleted; the content can still be loaded."""

    kind: ClassVar[CatalogEventKind] = CatalogEventKind.CONTENT_DELETING


class MovedContentEvent(ContentEvent):
    """Raised after content was moved to a new parent."""

    kind: ClassVar[CatalogEventKind] = CatalogEventKind.CONTENT_MOVED

    content: Optional[Any] = Field(None, description="The moved content, if supplied by the host.")
    target_link: Optional[ContentReference] = Field(None, description="New parent of the content.")


class PublishedContentEvent(ContentEvent):
    """Raised after content was published."""

    kind: ClassVar[CatalogEventKind] = CatalogEventKind.CONTENT_PUBLISHED

    content: Optional[Any] = Field(
        None, description="The published content, if supplied by the host."
    )


# ---------------------------------------------------------------------------
# Catalog key events
# ---------------------------------------------------------------------------


class CatalogKey(BaseModel):
    """Key of a catalog entry as used by the pricing system."""

    catalog_entry_code: str
    application_id: Optional[str] = None


class PriceUpdatedEvent(CatalogEvent):
    """Raised after prices of one or more entries were updated."""

    kind: ClassVar[CatalogEventKind] = CatalogEventKind.PRICE_UPDATED

    catalog_keys: List[CatalogKey] = Field(default_factory=list)


ChangeEvent = Union[
    AssociationChangedEvent,
    RelationChangedEvent,
    CreatedContentEvent,
    DeletingContentEvent,
    MovedContentEvent,
    PublishedContentEvent,
    PriceUpdatedEvent,
]
