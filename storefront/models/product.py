"""Product model - a listed piece of furniture or art.

Dimensions are stored only as structured numbers (inches and pounds); display
strings are derived by ``storefront.core.formatting.format_dimensions``.
"""

import uuid
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Date, Enum, ForeignKey, Integer, Numeric, String, Text, Uuid
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from storefront.models.color import product_colors
from storefront.schemas.catalog import ProductStatus

if TYPE_CHECKING:
    from storefront.models.category import Category
    from storefront.models.color import Color
    from storefront.models.country import Country
    from storefront.models.designer import Designer
    from storefront.models.maker import Maker
    from storefront.models.period import Period
    from storefront.models.product_image import ProductImage
    from storefront.models.style import Style
    from storefront.models.subcategory import Subcategory


def _attribute_fk(table: str) -> Mapped[uuid.UUID | None]:
    return mapped_column(
        Uuid,
        ForeignKey(f"{table}.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )


def _dimension() -> Mapped[Decimal | None]:
    return mapped_column(Numeric(10, 2), nullable=True)


class Product(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Catalog product.

    Maps to the `products` table. Every relationship loads eagerly with
    ``selectin`` so a fetched product always carries its expanded relations.
    """

    __tablename__ = "products"

    name: Mapped[str] = mapped_column(String(300), nullable=False)
    slug: Mapped[str] = mapped_column(String(300), unique=True, nullable=False, index=True)
    sku: Mapped[str | None] = mapped_column(String(50), unique=True, nullable=True)
    short_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    long_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    materials: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[list[str] | None] = mapped_column(ARRAY(String(100)), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    status: Mapped[ProductStatus] = mapped_column(
        Enum(ProductStatus, name="product_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ProductStatus.AVAILABLE,
        index=True,
    )
    year_created: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    go_live_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    product_width: Mapped[Decimal | None] = _dimension()
    product_height: Mapped[Decimal | None] = _dimension()
    product_depth: Mapped[Decimal | None] = _dimension()
    product_weight: Mapped[Decimal | None] = _dimension()
    box_width: Mapped[Decimal | None] = _dimension()
    box_height: Mapped[Decimal | None] = _dimension()
    box_depth: Mapped[Decimal | None] = _dimension()
    box_weight: Mapped[Decimal | None] = _dimension()
    dimension_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    featured_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    firstdibs_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    chairish_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    ebay_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    designer_id: Mapped[uuid.UUID | None] = _attribute_fk("designers")
    designer_attribution: Mapped[str | None] = mapped_column(String(300), nullable=True)
    maker_id: Mapped[uuid.UUID | None] = _attribute_fk("makers")
    maker_attribution: Mapped[str | None] = mapped_column(String(300), nullable=True)
    category_id: Mapped[uuid.UUID | None] = _attribute_fk("categories")
    subcategory_id: Mapped[uuid.UUID | None] = _attribute_fk("subcategories")
    style_id: Mapped[uuid.UUID | None] = _attribute_fk("styles")
    period_id: Mapped[uuid.UUID | None] = _attribute_fk("periods")
    period_attribution: Mapped[str | None] = mapped_column(String(300), nullable=True)
    country_id: Mapped[uuid.UUID | None] = _attribute_fk("countries")

    # Relationships
    designer: Mapped["Designer | None"] = relationship("Designer", lazy="selectin")
    maker: Mapped["Maker | None"] = relationship("Maker", lazy="selectin")
    category: Mapped["Category | None"] = relationship("Category", lazy="selectin")
    subcategory: Mapped["Subcategory | None"] = relationship("Subcategory", lazy="selectin")
    style: Mapped["Style | None"] = relationship("Style", lazy="selectin")
    period: Mapped["Period | None"] = relationship("Period", lazy="selectin")
    country: Mapped["Country | None"] = relationship("Country", lazy="selectin")
    colors: Mapped[list["Color"]] = relationship(
        "Color",
        secondary=product_colors,
        lazy="selectin",
        order_by="Color.name",
    )
    images: Mapped[list["ProductImage"]] = relationship(
        "ProductImage",
        back_populates="product",
        lazy="selectin",
        order_by="ProductImage.sort_order",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, slug='{self.slug}')>"
