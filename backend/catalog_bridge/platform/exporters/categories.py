"""Category export service.

The Ka-ching category structure is always replaced as a whole: any change to
the node tree re-sends every category reachable from the catalog root nodes.
"""

from typing import List, Optional

from catalog_bridge.core.config import Settings
from catalog_bridge.core.config import settings as default_settings
from catalog_bridge.core.logging import ContextualLogger
from catalog_bridge.core.logging import logger as default_logger
from catalog_bridge.platform.catalog import relations
from catalog_bridge.platform.catalog.content import NodeContent
from catalog_bridge.platform.catalog.graph import ContentGraphProvider
from catalog_bridge.platform.catalog.identity import ReferenceSet
from catalog_bridge.platform.http_client.export_client import ExportSink
from catalog_bridge.schemas.kaching import CategoriesImport, CategoryPayload


class CategoryExportService:
    """Exports the full category structure."""

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
        self.logger = logger or default_logger.with_context(component="category_export")

    def start_full_category_export(self) -> int:
        """Build and send the complete category tree."""
        categories = self.build_category_tree()
        self.logger.info(f"Exporting category structure with {len(categories)} root categories")
        return self._sink.post(
            CategoriesImport(categories=categories), self._settings.KACHING_CATEGORIES_URL
        )

    def build_category_tree(self) -> List[CategoryPayload]:
        """Build category payloads for all nodes reachable from the root nodes.

        A node reachable through several paths is included once, at the first
        position it is reached in a depth-first walk.
        """
        visited = ReferenceSet()
        roots = relations.load_nodes(self._graph, ReferenceSet(self._graph.get_root_nodes()))
        return [
            payload
            for payload in (self._build_category(node, visited) for node in roots)
            if payload is not None
        ]

    def _build_category(
        self, node: NodeContent, visited: ReferenceSet
    ) -> Optional[CategoryPayload]:
        if not visited.add(node.content_link):
            return None

        children = [
            payload
            for payload in (
                self._build_category(child, visited)
                for child in relations.child_nodes(self._graph, node.content_link)
            )
            if payload is not None
        ]
        return CategoryPayload(id=node.code, name=node.name, children=children or None)
