"""Catalog data shapes.

``ProductView`` is the relation-expanded product handed to the filter
compiler and the similarity scorer. Every optional relation is an immutable
reference value or None.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProductStatus(str, Enum):
    """Lifecycle status of a product. Any status may be set to any other."""

    AVAILABLE = "available"
    ON_HOLD = "on_hold"
    SOLD = "sold"
    INVENTORY = "inventory"


# Statuses shown to customers (inventory is back-office only)
LISTABLE_STATUSES: frozenset[ProductStatus] = frozenset(
    {ProductStatus.AVAILABLE, ProductStatus.ON_HOLD, ProductStatus.SOLD}
)


class EntityRef(BaseModel):
    """Reference to an attribute entity (designer, maker, category, ...)."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: UUID
    name: str
    slug: str


class DesignerRef(EntityRef):
    about: str | None = None


class SubcategoryRef(EntityRef):
    category_id: UUID | None = None


class CountryRef(EntityRef):
    code: str | None = None


class ColorRef(EntityRef):
    hex_code: str | None = None


class ProductImageRef(BaseModel):
    """Image attached to a product, ordered by sort_order."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: UUID
    image_url: str
    alt_text: str | None = None
    sort_order: int = 0


class ProductView(BaseModel):
    """Product with its relations expanded."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    sku: str | None = None
    short_description: str | None = None
    long_description: str | None = None
    materials: str | None = None
    tags: list[str] = Field(default_factory=list)
    price: Decimal | None = Field(default=None, ge=0)
    status: ProductStatus = ProductStatus.AVAILABLE
    year_created: int | None = None
    go_live_date: date | None = None

    product_width: Decimal | None = None
    product_height: Decimal | None = None
    product_depth: Decimal | None = None
    product_weight: Decimal | None = None
    box_width: Decimal | None = None
    box_height: Decimal | None = None
    box_depth: Decimal | None = None
    box_weight: Decimal | None = None
    dimension_notes: str | None = None

    featured_image_url: str | None = None
    firstdibs_url: str | None = None
    chairish_url: str | None = None
    ebay_url: str | None = None

    designer_id: UUID | None = None
    designer_attribution: str | None = None
    maker_id: UUID | None = None
    maker_attribution: str | None = None
    category_id: UUID | None = None
    subcategory_id: UUID | None = None
    style_id: UUID | None = None
    period_id: UUID | None = None
    period_attribution: str | None = None
    country_id: UUID | None = None

    designer: DesignerRef | None = None
    maker: EntityRef | None = None
    category: EntityRef | None = None
    subcategory: SubcategoryRef | None = None
    style: EntityRef | None = None
    period: EntityRef | None = None
    country: CountryRef | None = None
    colors: list[ColorRef] = Field(default_factory=list)
    images: list[ProductImageRef] = Field(default_factory=list)

    created_at: datetime | None = None

    @field_validator("tags", "colors", "images", mode="before")
    @classmethod
    def none_as_empty(cls, v: object) -> object:
        """Nullable array columns come back as None."""
        return [] if v is None else v

    @property
    def color_ids(self) -> frozenset[UUID]:
        return frozenset(color.id for color in self.colors)


class ScoredProduct(ProductView):
    """ProductView decorated with a transient similarity score.

    Serialized as ``_score``; never persisted.
    """

    score: int = Field(default=0, serialization_alias="_score")


class FilterState(BaseModel):
    """Catalog filter selections. Every field is optional; absent means unconstrained.

    Attribute filters are slugs. Year bounds are inclusive.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    search: str | None = None
    designer: str | None = None
    maker: str | None = None
    category: str | None = None
    subcategory: str | None = None
    style: str | None = None
    period: str | None = None
    country: str | None = None
    color: str | None = None
    year_from: int | None = Field(default=None, alias="yearFrom")
    year_to: int | None = Field(default=None, alias="yearTo")

    @field_validator(
        "search", "designer", "maker", "category", "subcategory",
        "style", "period", "country", "color",
        mode="before",
    )
    @classmethod
    def blank_as_absent(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class ProductListResponse(BaseModel):
    """Catalog listing. A failed read degrades to an empty list with a message."""

    products: list[ProductView] = Field(default_factory=list)
    total: int = 0
    message: str | None = None


class SimilarProductsResponse(BaseModel):
    products: list[ScoredProduct] = Field(default_factory=list)


class DesignerDetailResponse(BaseModel):
    designer: DesignerRef
    products: list[ProductView] = Field(default_factory=list)
