"""Period - era a piece dates from."""

from storefront.models.base import Base, SluggedMixin, TimestampMixin, UUIDPrimaryKeyMixin


class Period(UUIDPrimaryKeyMixin, SluggedMixin, TimestampMixin, Base):
    """Maps to the `periods` table."""

    __tablename__ = "periods"

    def __repr__(self) -> str:
        return f"<Period(id={self.id}, slug='{self.slug}')>"
