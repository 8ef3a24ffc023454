"""Identity-based sets used to de-duplicate references and loaded content.

Two identity rules apply:
- ReferenceSet collapses references to the same content across versions, so
  that one load request is issued per entity.
- ContentSet collapses loaded content by content_guid, the host's notion of
  content equality, regardless of the version or culture instance loaded.

Both keep first-seen insertion order, but callers must not rely on it.
"""

from typing import Dict, Generic, Hashable, Iterable, Iterator, Optional, Tuple, TypeVar
from uuid import UUID

from catalog_bridge.platform.catalog.content import CatalogContent, ContentReference

TContent = TypeVar("TContent", bound=CatalogContent)


class ReferenceSet:
    """Set of content references compared by identity, ignoring version."""

    def __init__(self, references: Optional[Iterable[ContentReference]] = None):
        self._items: Dict[Tuple[int, str], ContentReference] = {}
        for reference in references or ():
            self.add(reference)

    def add(self, reference: Optional[ContentReference]) -> bool:
        """Add a reference. Returns False for None or an already present entity."""
        if reference is None or reference.identity in self._items:
            return False
        self._items[reference.identity] = reference
        return True

    def __contains__(self, reference: object) -> bool:
        if not isinstance(reference, ContentReference):
            return False
        return reference.identity in self._items

    def __iter__(self) -> Iterator[ContentReference]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)


class ContentSet(Generic[TContent]):
    """Set of loaded catalog content compared by content identity."""

    def __init__(self, contents: Optional[Iterable[TContent]] = None):
        self._items: Dict[Hashable, TContent] = {}
        for content in contents or ():
            self.add(content)

    @staticmethod
    def identity_of(content: CatalogContent) -> UUID:
        """Get the identity used to compare content."""
        return content.content_guid

    def add(self, content: Optional[TContent]) -> bool:
        """Add content. Returns False for None or an already present entity."""
        if content is None:
            return False
        key = self.identity_of(content)
        if key in self._items:
            return False
        self._items[key] = content
        return True

    def update(self, contents: Iterable[TContent]) -> None:
        """Add all given content."""
        for content in contents:
            self.add(content)

    def __contains__(self, content: object) -> bool:
        if not isinstance(content, CatalogContent):
            return False
        return self.identity_of(content) in self._items

    def __iter__(self) -> Iterator[TContent]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)
