"""Builders wiring the catalog bridge together."""

from catalog_bridge.platform.builders.bridge import CatalogBridgeBuilder

__all__ = ["CatalogBridgeBuilder"]
