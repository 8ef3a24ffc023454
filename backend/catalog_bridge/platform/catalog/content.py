"""Catalog content model.

Content in the host graph is addressed by ContentReference and loaded as one
of a closed set of catalog content types:

    CatalogContent
    ├── EntryContent          (entries of other types, e.g. bundles/packages)
    │   ├── ProductContent
    │   └── VariationContent
    └── NodeContent

Anything the host returns that is not a CatalogContent lies outside the
catalog domain and is ignored by the bridge.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class ContentReference:
    """Reference to a unit of content in the host graph.

    Attributes:
        id: Identity of the content item
        work_id: Version of the content item (0 = published/common draft)
        provider: Content provider name, empty for the default provider
    """

    id: int
    work_id: int = 0
    provider: str = ""

    @property
    def identity(self) -> Tuple[int, str]:
        """Identity of the referenced content, ignoring version."""
        return (self.id, self.provider)

    def ignore_version(self) -> "ContentReference":
        """Get the same reference without a version component."""
        return ContentReference(id=self.id, provider=self.provider)

    def same_entity(self, other: Optional["ContentReference"]) -> bool:
        """Check whether both references point to the same content, ignoring version."""
        return other is not None and self.identity == other.identity

    def __str__(self) -> str:
        ref = str(self.id)
        if self.work_id:
            ref += f"_{self.work_id}"
        if self.provider:
            ref += f"__{self.provider}"
        return ref


def is_null_or_empty(reference: Optional[ContentReference]) -> bool:
    """Check whether a reference is missing or the host's empty reference."""
    return reference is None or reference.id <= 0


class ContentKind(str, Enum):
    """Kinds of catalog content."""

    PRODUCT = "product"
    VARIATION = "variation"
    ENTRY = "entry"
    NODE = "node"


class CatalogContent(BaseModel):
    """Base schema for all catalog content."""

    kind: ClassVar[ContentKind]

    content_link: ContentReference = Field(..., description="Reference to this content.")
    content_guid: UUID = Field(..., description="Stable identity of the content item.")
    name: str = Field(..., description="Name of the content.")
    parent_link: Optional[ContentReference] = Field(
        None, description="Reference to the container of this content."
    )
    language: Optional[str] = Field(None, description="Culture this instance was loaded in.")

    model_config = ConfigDict(arbitrary_types_allowed=True)


class EntryContent(CatalogContent):
    """Catalog entry. Used as-is for entry types other than products and variations."""

    kind: ClassVar[ContentKind] = ContentKind.ENTRY

    code: str = Field(..., description="Catalog entry code, used as id by the export API.")
    display_name: Optional[str] = Field(None, description="Display name of the entry.")
    properties: Dict[str, Any] = Field(
        default_factory=dict, description="Additional typed properties of the entry."
    )
    assets: List[str] = Field(default_factory=list, description="Asset URLs of the entry.")


class ProductContent(EntryContent):
    """Sellable product."""

    kind: ClassVar[ContentKind] = ContentKind.PRODUCT


class VariationContent(EntryContent):
    """Variant (SKU) belonging to one or more parent products."""

    kind: ClassVar[ContentKind] = ContentKind.VARIATION


class NodeContent(CatalogContent):
    """Catalog category node."""

    kind: ClassVar[ContentKind] = ContentKind.NODE

    code: str = Field(..., description="Catalog node code.")
