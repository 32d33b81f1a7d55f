"""Style - design movement (e.g. Mid-Century Modern)."""

from storefront.models.base import Base, SluggedMixin, TimestampMixin, UUIDPrimaryKeyMixin


class Style(UUIDPrimaryKeyMixin, SluggedMixin, TimestampMixin, Base):
    """Maps to the `styles` table."""

    __tablename__ = "styles"

    def __repr__(self) -> str:
        return f"<Style(id={self.id}, slug='{self.slug}')>"
