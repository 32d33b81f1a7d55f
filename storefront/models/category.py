"""Category model - catalog taxonomy root."""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Mapped, relationship

from storefront.models.base import Base, SluggedMixin, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from storefront.models.subcategory import Subcategory


class Category(UUIDPrimaryKeyMixin, SluggedMixin, TimestampMixin, Base):
    """Product category - root of the catalog taxonomy.

    Maps to the `categories` table.
    """

    __tablename__ = "categories"

    subcategories: Mapped[list["Subcategory"]] = relationship(
        "Subcategory",
        back_populates="category",
        lazy="selectin",
        order_by="Subcategory.name",
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, slug='{self.slug}')>"
