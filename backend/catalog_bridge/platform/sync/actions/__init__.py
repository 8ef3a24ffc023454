"""Actions module for the export pipeline.

Types (types.py):
    ResolvedSet, ExportAction and its variants

Resolver and Dispatcher:
    CatalogEntityResolver, ExportDispatcher
"""

from .dispatcher import ExportDispatcher
from .resolver import CatalogEntityResolver
from .types import (
    DeleteChildProducts,
    DeleteProductAssets,
    DeleteProductRecommendations,
    DeleteProducts,
    ExportAction,
    ExportActionType,
    ExportChildProducts,
    ExportProduct,
    ExportProductAssets,
    ExportProductRecommendations,
    InvalidateAssociationCache,
    ResolvedSet,
    StartFullCategoryExport,
)

__all__ = [
    # Types
    "DeleteChildProducts",
    "DeleteProductAssets",
    "DeleteProductRecommendations",
    "DeleteProducts",
    "ExportAction",
    "ExportActionType",
    "ExportChildProducts",
    "ExportProduct",
    "ExportProductAssets",
    "ExportProductRecommendations",
    "InvalidateAssociationCache",
    "ResolvedSet",
    "StartFullCategoryExport",
    # Resolver and dispatcher
    "CatalogEntityResolver",
    "ExportDispatcher",
]
