"""Export services for products and categories."""

from catalog_bridge.platform.exporters.categories import CategoryExportService
from catalog_bridge.platform.exporters.products import ProductExportService

__all__ = ["CategoryExportService", "ProductExportService"]
