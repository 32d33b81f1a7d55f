"""SiteSetting model - key/value settings edited from the back-office."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from storefront.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class SiteSetting(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Maps to the `settings` table."""

    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<SiteSetting(key='{self.key}')>"
