"""Country model - country of origin."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from storefront.models.base import Base, SluggedMixin, TimestampMixin, UUIDPrimaryKeyMixin


class Country(UUIDPrimaryKeyMixin, SluggedMixin, TimestampMixin, Base):
    """Maps to the `countries` table."""

    __tablename__ = "countries"

    code: Mapped[str | None] = mapped_column(String(3), nullable=True)

    def __repr__(self) -> str:
        return f"<Country(id={self.id}, code='{self.code}')>"
