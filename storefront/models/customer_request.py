"""Customer-submitted records: holds, offers, purchase inquiries, spec sheet downloads.

All of them reference a product and carry the customer's contact details.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, declared_attr, mapped_column, relationship

from storefront.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from storefront.models.product import Product


class CustomerContactMixin:
    """Product reference plus contact details shared by customer records."""

    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    customer_name: Mapped[str] = mapped_column(String(200), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(320), nullable=False)

    @declared_attr
    def product(cls) -> Mapped["Product"]:
        return relationship("Product", lazy="selectin")


class ProductHold(UUIDPrimaryKeyMixin, CustomerContactMixin, TimestampMixin, Base):
    """Temporary reservation of a product.

    Maps to the `product_holds` table.
    """

    __tablename__ = "product_holds"

    customer_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    hold_duration_hours: Mapped[int] = mapped_column(Integer, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<ProductHold(id={self.id}, product_id={self.product_id})>"


class Offer(UUIDPrimaryKeyMixin, CustomerContactMixin, TimestampMixin, Base):
    """Maps to the `offers` table."""

    __tablename__ = "offers"

    customer_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    offer_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<Offer(id={self.id}, amount={self.offer_amount})>"


class PurchaseInquiry(UUIDPrimaryKeyMixin, CustomerContactMixin, TimestampMixin, Base):
    """Maps to the `purchase_inquiries` table."""

    __tablename__ = "purchase_inquiries"

    customer_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<PurchaseInquiry(id={self.id}, product_id={self.product_id})>"


class SpecSheetDownload(UUIDPrimaryKeyMixin, CustomerContactMixin, TimestampMixin, Base):
    """Record of a customer requesting a product spec sheet.

    Maps to the `spec_sheet_downloads` table.
    """

    __tablename__ = "spec_sheet_downloads"

    include_price: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<SpecSheetDownload(id={self.id}, product_id={self.product_id})>"
