"""Maker - manufacturer or workshop that produced a piece."""

from storefront.models.base import Base, SluggedMixin, TimestampMixin, UUIDPrimaryKeyMixin


class Maker(UUIDPrimaryKeyMixin, SluggedMixin, TimestampMixin, Base):
    """Maps to the `makers` table."""

    __tablename__ = "makers"

    def __repr__(self) -> str:
        return f"<Maker(id={self.id}, slug='{self.slug}')>"
