"""SQLAlchemy models for the storefront database."""

from storefront.models.base import Base, SluggedMixin, TimestampMixin, UUIDPrimaryKeyMixin
from storefront.models.category import Category
from storefront.models.color import Color, product_colors
from storefront.models.country import Country
from storefront.models.customer_request import (
    Offer,
    ProductHold,
    PurchaseInquiry,
    SpecSheetDownload,
)
from storefront.models.designer import Designer
from storefront.models.maker import Maker
from storefront.models.period import Period
from storefront.models.product import Product
from storefront.models.product_image import ProductImage
from storefront.models.site_setting import SiteSetting
from storefront.models.style import Style
from storefront.models.subcategory import Subcategory

__all__ = [
    "Base",
    "SluggedMixin",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "Category",
    "Color",
    "Country",
    "Designer",
    "Maker",
    "Offer",
    "Period",
    "Product",
    "ProductHold",
    "ProductImage",
    "PurchaseInquiry",
    "SiteSetting",
    "SpecSheetDownload",
    "Style",
    "Subcategory",
    "product_colors",
]
