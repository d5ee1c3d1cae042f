# storefront/schemas/product.py
from __future__ import annotations

import re
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, List, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasGenerator,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from storefront.schemas.category import CategoryRead

# SKU: letters/digits + . _ - ; max 64; no spaces
SKU_RE = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

ProductStatus = Literal["active", "inactive", "draft", "out_of_stock"]


def _quantize_price(v: Decimal) -> Decimal:
    # Align with NUMERIC(12,2)
    return v.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _snake_or_camel(field_name: str) -> AliasChoices:
    # Admin forms send both `category_id` and `categoryId` style keys
    return AliasChoices(field_name, to_camel(field_name))


class _ProductFields(BaseModel):
    """Every writable product column, all optional; validators shared by create and patch."""

    model_config = ConfigDict(
        alias_generator=AliasGenerator(validation_alias=_snake_or_camel),
        populate_by_name=True,
        extra="ignore",
    )

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    short_description: Optional[str] = Field(None, max_length=500)

    price: Optional[Decimal] = Field(None, ge=0)
    regular_price: Optional[Decimal] = Field(None, ge=0)
    cost_price: Optional[Decimal] = Field(None, ge=0)

    quantity: Optional[int] = Field(None, ge=0)
    min_stock_alert: Optional[int] = Field(None, ge=0)
    unit_of_measurement: Optional[str] = Field(None, max_length=50)
    package_size: Optional[str] = Field(None, max_length=100)

    category_id: Optional[int] = Field(None, ge=1)
    subcategory_id: Optional[int] = None
    brand: Optional[str] = Field(None, max_length=100)
    sku: Optional[str] = Field(None, min_length=1, max_length=64)
    barcode: Optional[str] = Field(None, max_length=64)
    tags: Optional[str] = Field(None, max_length=500)

    image_url: Optional[str] = Field(None, max_length=1000)
    gallery_images: Optional[List[str]] = None
    video_url: Optional[str] = Field(None, max_length=1000)
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = Field(None, max_length=500)

    free_shipping: Optional[bool] = None
    shipping_time: Optional[str] = Field(None, max_length=100)
    warranty_period: Optional[int] = Field(None, ge=0)
    weight_for_shipping: Optional[Decimal] = Field(None, ge=0)
    dimensions: Optional[str] = Field(None, max_length=100)
    delivery_time_estimate: Optional[str] = Field(None, max_length=100)
    is_returnable: Optional[bool] = None
    is_cod_available: Optional[bool] = None

    eco_friendly: Optional[bool] = None
    eco_friendly_details: Optional[str] = Field(None, max_length=255)
    is_featured: Optional[bool] = None
    is_best_seller: Optional[bool] = None
    is_new_arrival: Optional[bool] = None
    status: Optional[ProductStatus] = None

    # --- Validators ---
    @field_validator("name")
    @classmethod
    def _name_strip_nonempty(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name must not be empty")
        return v

    @field_validator("description", "short_description")
    @classmethod
    def _descr_strip(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        return v or None

    @field_validator("sku")
    @classmethod
    def _sku_validate(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not SKU_RE.match(v):
            raise ValueError("Invalid SKU (allowed: letters, digits, . _ -, max 64)")
        return v

    @field_validator("price", "regular_price", "cost_price")
    @classmethod
    def _price_quantize(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is None:
            return v
        return _quantize_price(v)


class ProductCreate(_ProductFields):
    """Payload for creating a product; name, price and category are required."""

    name: str = Field(..., min_length=1, max_length=255)
    price: Decimal = Field(..., ge=0)
    category_id: int = Field(..., ge=1)

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "name": "Organic Neem Soap",
                    "description": "Cold-processed soap with neem oil",
                    "price": "4.99",
                    "categoryId": 3,
                    "quantity": 120,
                    "sku": "GM-NEEM-100G",
                }
            ]
        }
    )


# Columns that are NOT NULL: a patch may omit them but never set them to null.
_NON_NULLABLE = frozenset(
    {
        "name",
        "slug",
        "price",
        "quantity",
        "min_stock_alert",
        "sku",
        "tags",
        "free_shipping",
        "is_returnable",
        "is_cod_available",
        "eco_friendly",
        "is_featured",
        "is_best_seller",
        "is_new_arrival",
        "status",
    }
)


class ProductPatch(_ProductFields):
    """
    Partial update. Only the keys present in the request body are applied
    (`model_dump(exclude_unset=True)`); an explicit null clears a nullable column.
    """

    @model_validator(mode="after")
    def _reject_null_for_required_columns(self) -> "ProductPatch":
        nulls = sorted(k for k in self.model_fields_set & _NON_NULLABLE if getattr(self, k) is None)
        if nulls:
            raise ValueError(f"fields cannot be null: {', '.join(nulls)}")
        return self

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class ProductFilter(BaseModel):
    """Listing filters; every one is optional and they combine with AND."""

    category_id: Optional[int] = None
    min_price: Optional[Decimal] = Field(None, ge=0)
    max_price: Optional[Decimal] = Field(None, ge=0)
    q: Optional[str] = None

    @field_validator("q")
    @classmethod
    def _q_strip(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        return v or None


class ProductRead(BaseModel):
    """Product as returned by the API (joined with its category name)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    description: Optional[str] = None
    short_description: Optional[str] = None
    price: Decimal
    regular_price: Optional[Decimal] = None
    cost_price: Optional[Decimal] = None
    quantity: int
    min_stock_alert: int
    unit_of_measurement: Optional[str] = None
    package_size: Optional[str] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    subcategory_id: Optional[int] = None
    brand: Optional[str] = None
    sku: str
    barcode: Optional[str] = None
    tags: str = ""
    image_url: Optional[str] = None
    gallery_images: Optional[List[str]] = None
    video_url: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    free_shipping: bool
    shipping_time: Optional[str] = None
    warranty_period: Optional[int] = None
    weight_for_shipping: Optional[Decimal] = None
    dimensions: Optional[str] = None
    delivery_time_estimate: Optional[str] = None
    is_returnable: bool
    is_cod_available: bool
    eco_friendly: bool
    eco_friendly_details: Optional[str] = None
    is_featured: bool
    is_best_seller: bool
    is_new_arrival: bool
    status: str
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# --- Response envelopes ---

class Pagination(BaseModel):
    # built by field name, rendered as "hasMore"
    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    has_more: bool = Field(alias="hasMore")



class ProductListData(BaseModel):
    products: List[ProductRead]


class ProductListEnvelope(BaseModel):
    status: Literal["success"] = "success"
    results: int
    pagination: Pagination
    data: ProductListData


class RelatedProductsEnvelope(BaseModel):
    status: Literal["success"] = "success"
    results: int
    data: ProductListData


class CategoryProductsData(BaseModel):
    category: CategoryRead
    products: List[ProductRead]


class CategoryProductsEnvelope(BaseModel):
    status: Literal["success"] = "success"
    results: int
    pagination: Pagination
    data: CategoryProductsData


class ProductData(BaseModel):
    product: ProductRead


class ProductEnvelope(BaseModel):
    status: Literal["success"] = "success"
    data: ProductData


class MessageEnvelope(BaseModel):
    status: Literal["success"] = "success"
    message: str
