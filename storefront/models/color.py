"""Color model and the product/color join table."""

from sqlalchemy import Column, ForeignKey, Index, String, Table, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from storefront.models.base import Base, SluggedMixin, TimestampMixin, UUIDPrimaryKeyMixin

# Many-to-many join between products and colors
product_colors = Table(
    "product_colors",
    Base.metadata,
    Column("product_id", Uuid, ForeignKey("products.id", ondelete="CASCADE"), primary_key=True),
    Column("color_id", Uuid, ForeignKey("colors.id", ondelete="CASCADE"), primary_key=True),
    Index("ix_product_colors_color_id", "color_id"),
)


class Color(UUIDPrimaryKeyMixin, SluggedMixin, TimestampMixin, Base):
    """Maps to the `colors` table."""

    __tablename__ = "colors"

    hex_code: Mapped[str | None] = mapped_column(String(7), nullable=True)

    def __repr__(self) -> str:
        return f"<Color(id={self.id}, slug='{self.slug}')>"
