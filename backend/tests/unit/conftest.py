"""Unit test conftest for setting up test environment."""

import os

# Set required environment variables before importing any catalog_bridge modules
# This prevents Settings initialization errors during test collection
os.environ.setdefault("KACHING_PRODUCTS_URL", "https://kaching.test/imports/products?account=test")
os.environ.setdefault(
    "KACHING_PRODUCT_ASSETS_URL", "https://kaching.test/imports/product_assets?account=test"
)
os.environ.setdefault(
    "KACHING_RECOMMENDATIONS_URL", "https://kaching.test/imports/recommendations?account=test"
)
os.environ.setdefault("KACHING_CATEGORIES_URL", "https://kaching.test/imports/folders?account=test")
os.environ.setdefault("LOCAL_DEVELOPMENT", "true")

from typing import Dict, List, Optional, Sequence, Tuple, Union  # noqa: E402
from unittest.mock import MagicMock  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402

from catalog_bridge.platform.catalog.content import (  # noqa: E402
    CatalogContent,
    ContentReference,
    EntryContent,
    NodeContent,
    ProductContent,
    VariationContent,
)
from catalog_bridge.platform.catalog.graph import (  # noqa: E402
    Association,
    CatalogContentType,
    Relation,
    RelationKind,
)
from catalog_bridge.platform.http_client.export_client import ExportSink  # noqa: E402


class FakeContentGraph:
    """In-memory ContentGraphProvider recording batch loads."""

    def __init__(self):
        self.contents: Dict[Tuple[int, str], object] = {}
        self.relations: List[Relation] = []
        self.associations: List[Association] = []
        self.root_nodes: List[ContentReference] = []
        self.keys: Dict[Tuple[CatalogContentType, Union[int, str]], ContentReference] = {}
        self.load_calls: List[List[ContentReference]] = []

    def add(self, content: object, link: ContentReference) -> None:
        self.contents[link.identity] = content

    def try_get(self, reference: ContentReference, culture: str = "") -> Optional[object]:
        return self.contents.get(reference.identity)

    def get_items(self, references, culture: str = "") -> Sequence[object]:
        references = list(references)
        self.load_calls.append(references)
        return [self.contents[r.identity] for r in references if r.identity in self.contents]

    def get_parents(self, reference: ContentReference, kind: RelationKind) -> Sequence[Relation]:
        return [r for r in self.relations if r.kind == kind and r.child.same_entity(reference)]

    def get_children(self, reference: ContentReference, kind: RelationKind) -> Sequence[Relation]:
        return [r for r in self.relations if r.kind == kind and r.parent.same_entity(reference)]

    def get_associations(self, reference: ContentReference) -> Sequence[Association]:
        return [a for a in self.associations if a.source.same_entity(reference)]

    def get_root_nodes(self) -> Sequence[ContentReference]:
        return list(self.root_nodes)

    def convert_key_to_reference(
        self,
        key,
        content_type: CatalogContentType = CatalogContentType.CATALOG_ENTRY,
        version: int = 0,
    ) -> Optional[ContentReference]:
        reference = self.keys.get((content_type, key))
        if reference is None:
            return None
        return ContentReference(id=reference.id, work_id=version, provider=reference.provider)


class CatalogFactory:
    """Builds catalog content and relations in a FakeContentGraph."""

    def __init__(self, graph: FakeContentGraph):
        self.graph = graph

    def product(self, id: int, code: str, parent: Optional[CatalogContent] = None, **fields):
        return self._entry(ProductContent, id, code, parent, **fields)

    def variation(self, id: int, code: str, *products: ProductContent, **fields):
        variation = self._entry(VariationContent, id, code, None, **fields)
        for product in products:
            sort_order = len(
                self.graph.get_children(product.content_link, RelationKind.PRODUCT_VARIATION)
            )
            self.relate(product, variation, RelationKind.PRODUCT_VARIATION, sort_order)
        return variation

    def bundle(self, id: int, code: str):
        return self._entry(EntryContent, id, code, None)

    def node(self, id: int, code: str, parent: Optional[NodeContent] = None, root: bool = False):
        link = ContentReference(id=id)
        node = NodeContent(
            content_link=link,
            content_guid=uuid4(),
            name=code.title(),
            code=code,
            parent_link=parent.content_link if parent else None,
        )
        self.graph.add(node, link)
        self.graph.keys[(CatalogContentType.CATALOG_NODE, id)] = link
        if parent is not None:
            self.relate(parent, node, RelationKind.NODE_NODE)
        if root:
            self.graph.root_nodes.append(link)
        return node

    def link_entry(self, node: NodeContent, entry: EntryContent, sort_order: int = 0) -> None:
        self.relate(node, entry, RelationKind.NODE_ENTRY, sort_order)

    def associate(self, source: EntryContent, target: EntryContent) -> None:
        self.graph.associations.append(
            Association(source=source.content_link, target=target.content_link)
        )

    def relate(self, parent, child, kind: RelationKind, sort_order: int = 0) -> None:
        self.graph.relations.append(
            Relation(
                parent=parent.content_link,
                child=child.content_link,
                kind=kind,
                sort_order=sort_order,
            )
        )

    def _entry(self, cls, id: int, code: str, parent, **fields):
        link = ContentReference(id=id)
        entry = cls(
            content_link=link,
            content_guid=uuid4(),
            name=code.lower(),
            code=code,
            parent_link=parent.content_link if parent else None,
            **fields,
        )
        self.graph.add(entry, link)
        self.graph.keys[(CatalogContentType.CATALOG_ENTRY, id)] = link
        self.graph.keys[(CatalogContentType.CATALOG_ENTRY, code)] = link
        return entry


@pytest.fixture
def graph():
    """Create an empty in-memory content graph."""
    return FakeContentGraph()


@pytest.fixture
def catalog(graph):
    """Create a factory populating the content graph."""
    return CatalogFactory(graph)


@pytest.fixture
def mock_sink():
    """Create a mock ExportSink returning 200 for every call."""
    sink = MagicMock(spec=ExportSink)
    sink.post.return_value = 200
    sink.delete.return_value = 200
    return sink


@pytest.fixture
def mock_cache():
    """Create a mock host object cache."""
    return MagicMock()


@pytest.fixture
def mock_logger():
    """Create a mock ContextualLogger."""
    logger = MagicMock()
    logger.with_context.return_value = logger
    return logger
