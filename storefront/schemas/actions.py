"""Customer action schemas: holds, offers, purchase inquiries and spec sheets."""

import re
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _clean_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("customer_name must not be blank")
    return v


def _clean_email(v: str) -> str:
    v = v.strip()
    if not _EMAIL_RE.match(v):
        raise ValueError("customer_email is not a valid email address")
    return v


def _blank_as_none(v: str | None) -> str | None:
    if v is None:
        return None
    return v.strip() or None


class ContactDetails(BaseModel):
    """Contact details every customer submission carries."""

    customer_name: str = Field(min_length=1, max_length=200)
    customer_email: str = Field(min_length=3, max_length=320)
    customer_phone: str | None = Field(default=None, max_length=50)

    model_config = {"extra": "forbid"}

    @field_validator("customer_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _clean_name(v)

    @field_validator("customer_email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _clean_email(v)

    @field_validator("customer_phone")
    @classmethod
    def blank_phone_as_none(cls, v: str | None) -> str | None:
        return _blank_as_none(v)


class HoldRequest(ContactDetails):
    """Request to hold a product."""


class OfferRequest(ContactDetails):
    """Offer on a product. Informational only; no payment is taken."""

    offer_amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    message: str | None = Field(default=None, max_length=5000)

    @field_validator("message")
    @classmethod
    def blank_message_as_none(cls, v: str | None) -> str | None:
        return _blank_as_none(v)


class PurchaseInquiryRequest(ContactDetails):
    """Request to be contacted about buying a product."""

    message: str | None = Field(default=None, max_length=5000)

    @field_validator("message")
    @classmethod
    def blank_message_as_none(cls, v: str | None) -> str | None:
        return _blank_as_none(v)


class HoldResponse(BaseModel):
    """Hold placed on a product."""

    id: UUID
    product_id: UUID
    hold_duration_hours: int
    created_at: datetime
    expires_at: datetime


class SubmissionResponse(BaseModel):
    """Acknowledgement of an offer or purchase inquiry."""

    success: bool = True
    id: UUID
    product_id: UUID


class SpecSheetRequest(BaseModel):
    """Customer request for a product spec sheet."""

    customer_name: str = Field(min_length=1, max_length=200)
    customer_email: str = Field(min_length=3, max_length=320)
    include_price: bool = True

    model_config = {"extra": "forbid"}

    @field_validator("customer_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _clean_name(v)

    @field_validator("customer_email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _clean_email(v)


class SpecSheetDimensions(BaseModel):
    product: str | None = None
    box: str | None = None
    notes: str | None = None


class SpecSheet(BaseModel):
    """Spec sheet document content, ready for a PDF/HTML renderer."""

    business_name: str
    business_phone: str
    product_name: str
    product_url: str
    price: str | None = Field(default=None, description="Formatted price, omitted on request")
    sku: str | None = None
    short_description: str | None = None
    long_description: str | None = None
    materials: str | None = None
    year_created: int | None = None
    attributes: dict[str, str] = Field(
        default_factory=dict,
        description="Attribute label -> display name (Designer, Maker, Category, ...)",
    )
    dimensions: SpecSheetDimensions = Field(default_factory=SpecSheetDimensions)
    featured_image_url: str | None = None
