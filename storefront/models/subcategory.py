"""Subcategory model - second level of the catalog taxonomy."""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.models.base import Base, SluggedMixin, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from storefront.models.category import Category


class Subcategory(UUIDPrimaryKeyMixin, SluggedMixin, TimestampMixin, Base):
    """Subcategory, optionally attached to a parent category.

    Maps to the `subcategories` table.
    """

    __tablename__ = "subcategories"

    category_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Relationships
    category: Mapped["Category | None"] = relationship(
        "Category",
        back_populates="subcategories",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Subcategory(id={self.id}, slug='{self.slug}')>"
