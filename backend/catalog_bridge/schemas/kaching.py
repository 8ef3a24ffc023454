"""Payloads for the Ka-ching import API.

Field names are sent in lower snake case and null fields are omitted.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_snake


class ExportPayload(BaseModel):
    """Base class for payloads sent to the export API."""

    model_config = ConfigDict(alias_generator=to_snake, populate_by_name=True)

    def to_json_dict(self) -> Dict[str, Any]:
        """Serialize with snake_case field names, omitting null fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ProductVariantPayload(ExportPayload):
    """A variant of a product."""

    id: str = Field(..., description="Variation code.")
    name: str = Field(..., description="Display name of the variant.")
    barcode: Optional[str] = None
    retail_price: Optional[float] = None
    image_url: Optional[str] = None


class ProductPayload(ExportPayload):
    """A product with its variants."""

    id: str = Field(..., description="Product code.")
    name: str = Field(..., description="Display name of the product.")
    description: Optional[str] = None
    barcode: Optional[str] = None
    retail_price: Optional[float] = None
    image_url: Optional[str] = None
    tags: Optional[Dict[str, bool]] = Field(
        None, description="Category codes the product is listed in."
    )
    variants: Optional[List[ProductVariantPayload]] = None


class ProductsImport(ExportPayload):
    """Request body of a product import."""

    products: List[ProductPayload]


class ProductAssetsPayload(ExportPayload):
    """Assets of one product."""

    product_id: str
    urls: List[str] = Field(default_factory=list)


class ProductAssetsImport(ExportPayload):
    """Request body of a product asset import."""

    assets: List[ProductAssetsPayload]


class RecommendationPayload(ExportPayload):
    """Recommended products of one product."""

    product_id: str
    recommendations: List[str] = Field(default_factory=list)


class RecommendationsImport(ExportPayload):
    """Request body of a recommendations import."""

    recommendations: List[RecommendationPayload]


class CategoryPayload(ExportPayload):
    """A category with its sub-categories."""

    id: str = Field(..., description="Node code.")
    name: str
    children: Optional[List["CategoryPayload"]] = None


class CategoriesImport(ExportPayload):
    """Request body of a full category structure import."""

    categories: List[CategoryPayload]


class DeleteRequest(ExportPayload):
    """Request body of a delete call."""

    ids: List[str]
