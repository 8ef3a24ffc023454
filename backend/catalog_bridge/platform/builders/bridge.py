"""Catalog bridge builder."""

from typing import Optional

from catalog_bridge.core.config import Settings
from catalog_bridge.core.config import settings as default_settings
from catalog_bridge.core.logging import ContextualLogger, LoggerConfigurator
from catalog_bridge.platform.catalog.graph import ContentGraphProvider, ObjectCache
from catalog_bridge.platform.exporters.categories import CategoryExportService
from catalog_bridge.platform.exporters.products import ProductExportService
from catalog_bridge.platform.http_client.export_client import ExportSink, HttpExportSink
from catalog_bridge.platform.sync.actions.dispatcher import ExportDispatcher
from catalog_bridge.platform.sync.actions.resolver import CatalogEntityResolver
from catalog_bridge.platform.sync.router import CatalogEventRouter


class CatalogBridgeBuilder:
    """Builds the event router with its resolver, dispatcher and exporters."""

    @classmethod
    def build(
        cls,
        graph: ContentGraphProvider,
        cache: ObjectCache,
        sink: Optional[ExportSink] = None,
        settings: Optional[Settings] = None,
        logger: Optional[ContextualLogger] = None,
    ) -> CatalogEventRouter:
        """Build a router ready to be initialized against the host's events.

        Args:
            graph: Host content graph
            cache: Host object cache
            sink: Export sink, defaults to an HttpExportSink
            settings: Settings, defaults to the global settings
            logger: Logger, defaults to a logger for "catalog_bridge.sync"

        Returns:
            CatalogEventRouter wired to the export pipeline.
        """
        settings = settings or default_settings
        logger = logger or LoggerConfigurator.configure_logger(
            "catalog_bridge.sync", dimensions={"environment": settings.ENVIRONMENT or "local"}
        )
        sink = sink or HttpExportSink(
            timeout=settings.EXPORT_HTTP_TIMEOUT,
            logger=logger.with_context(component="export_sink"),
        )

        product_exporter = ProductExportService(
            graph, sink, settings=settings, logger=logger.with_context(component="product_export")
        )
        category_exporter = CategoryExportService(
            graph, sink, settings=settings, logger=logger.with_context(component="category_export")
        )
        dispatcher = ExportDispatcher(
            product_exporter,
            category_exporter,
            cache,
            settings=settings,
            logger=logger.with_context(component="dispatcher"),
        )
        resolver = CatalogEntityResolver(graph, logger=logger.with_context(component="resolver"))

        logger.info("Built catalog bridge")
        return CatalogEventRouter(
            resolver, dispatcher, logger=logger.with_context(component="router")
        )
