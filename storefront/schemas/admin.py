"""Back-office request and response schemas."""

import re
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.schemas.catalog import ProductImageRef, ProductStatus, ProductView

_SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_HEX_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


def validate_slug(v: str) -> str:
    v = v.strip()
    if not _SLUG_RE.match(v):
        raise ValueError("slug must be lowercase letters, digits and single hyphens")
    return v


def normalize_tags(tags: list[str]) -> list[str]:
    """Strip tags, drop blanks and duplicates, keep first-seen order."""
    seen: dict[str, None] = {}
    for tag in tags:
        tag = tag.strip()
        if tag:
            seen.setdefault(tag, None)
    return list(seen)


class AttributeIn(BaseModel):
    """Create/update payload for an attribute entity.

    Only the fields a kind actually has are written; ``about`` applies to
    designers, ``hex_code`` to colors, ``code`` to countries and
    ``category_id`` to subcategories.
    """

    name: str = Field(min_length=1, max_length=200)
    slug: str = Field(min_length=1, max_length=200)
    about: str | None = None
    hex_code: str | None = None
    code: str | None = Field(default=None, max_length=3)
    category_id: UUID | None = None

    model_config = {"extra": "forbid"}

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()

    @field_validator("slug")
    @classmethod
    def check_slug(cls, v: str) -> str:
        return validate_slug(v)

    @field_validator("hex_code")
    @classmethod
    def check_hex(cls, v: str | None) -> str | None:
        if v is not None and not _HEX_RE.match(v):
            raise ValueError("hex_code must look like #a1b2c3")
        return v


class AttributeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    about: str | None = None
    hex_code: str | None = None
    code: str | None = None
    category_id: UUID | None = None
    created_at: datetime | None = None


class SubcategoryWithCount(BaseModel):
    id: UUID
    name: str
    slug: str
    category_id: UUID | None = None
    product_count: int = 0


class CategoryWithCounts(BaseModel):
    id: UUID
    name: str
    slug: str
    product_count: int = 0
    subcategory_count: int = 0
    subcategories: list[SubcategoryWithCount] = Field(default_factory=list)


class DesignerImportEntry(BaseModel):
    """One designer in a bulk import. Entries missing name or slug are skipped."""

    name: str | None = None
    slug: str | None = None
    about: str | None = None


class DesignerImportRequest(BaseModel):
    designers: list[DesignerImportEntry]


class ImportResult(BaseModel):
    success: bool = True
    imported: int
    skipped: int
    message: str


class ProductIn(BaseModel):
    """Product create payload. Dimensions are inches, weights pounds."""

    name: str = Field(min_length=1, max_length=300)
    slug: str = Field(min_length=1, max_length=300)
    sku: str | None = Field(default=None, max_length=50)
    status: ProductStatus = ProductStatus.AVAILABLE
    short_description: str | None = None
    long_description: str | None = None
    materials: str | None = None
    tags: list[str] = Field(default_factory=list)
    notes: str | None = None
    price: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    year_created: int | None = Field(default=None, ge=0, le=9999)
    go_live_date: date | None = None

    product_width: Decimal | None = Field(default=None, ge=0)
    product_height: Decimal | None = Field(default=None, ge=0)
    product_depth: Decimal | None = Field(default=None, ge=0)
    product_weight: Decimal | None = Field(default=None, ge=0)
    box_width: Decimal | None = Field(default=None, ge=0)
    box_height: Decimal | None = Field(default=None, ge=0)
    box_depth: Decimal | None = Field(default=None, ge=0)
    box_weight: Decimal | None = Field(default=None, ge=0)
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

    color_ids: list[UUID] = Field(default_factory=list)

    model_config = {"extra": "forbid"}

    @field_validator("slug")
    @classmethod
    def check_slug(cls, v: str) -> str:
        return validate_slug(v)

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str]) -> list[str]:
        return normalize_tags(v)


class ProductPatch(ProductIn):
    """Partial product update; only fields that are sent are written."""

    name: str | None = Field(default=None, min_length=1, max_length=300)
    slug: str | None = Field(default=None, min_length=1, max_length=300)
    status: ProductStatus | None = None
    tags: list[str] | None = None
    color_ids: list[UUID] | None = None

    @field_validator("slug")
    @classmethod
    def check_slug(cls, v: str | None) -> str | None:
        return validate_slug(v) if v is not None else None

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str] | None) -> list[str] | None:
        return normalize_tags(v) if v is not None else None


class ImageOrder(BaseModel):
    id: UUID
    sort_order: int = Field(ge=0)


class ImageUploadResponse(BaseModel):
    success: bool = True
    images: list[ProductImageRef] = Field(default_factory=list)
    message: str


class FeaturedImageRequest(BaseModel):
    image_url: str = Field(min_length=1)


class GoLiveDateRequest(BaseModel):
    go_live_date: date | None = None


class ProductSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    price: Decimal | None = None


class CustomerRequestView(BaseModel):
    """Hold, offer, inquiry or spec sheet download as listed in the back-office."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    product_id: UUID
    product: ProductSummary | None = None
    customer_name: str
    customer_email: str
    customer_phone: str | None = None
    created_at: datetime | None = None


class HoldView(CustomerRequestView):
    hold_duration_hours: int
    expires_at: datetime
    is_expired: bool = False


class OfferView(CustomerRequestView):
    offer_amount: Decimal
    message: str | None = None
    is_read: bool = False


class InquiryView(CustomerRequestView):
    message: str | None = None
    is_read: bool = False


class SpecSheetDownloadView(CustomerRequestView):
    include_price: bool = True


class DashboardStats(BaseModel):
    total_products: int = 0
    available_products: int = 0
    sold_products: int = 0
    active_holds: int = 0
    total_offers: int = 0
    unread_offers: int = 0
    total_inquiries: int = 0
    unread_inquiries: int = 0


class InventoryDay(BaseModel):
    go_live_date: date
    products: list[ProductView] = Field(default_factory=list)


class InventorySchedule(BaseModel):
    scheduled: list[InventoryDay] = Field(default_factory=list)
    unscheduled: list[ProductView] = Field(default_factory=list)


class ReleaseResult(BaseModel):
    released: int
