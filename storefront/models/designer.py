"""Designer - person credited with a design."""

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from storefront.models.base import Base, SluggedMixin, TimestampMixin, UUIDPrimaryKeyMixin


class Designer(UUIDPrimaryKeyMixin, SluggedMixin, TimestampMixin, Base):
    """Maps to the `designers` table."""

    __tablename__ = "designers"

    about: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Designer(id={self.id}, slug='{self.slug}')>"
