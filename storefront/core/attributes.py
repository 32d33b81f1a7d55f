"""Attribute kinds and how catalog filters map onto them."""

from dataclasses import dataclass
from enum import Enum


class AttributeKind(str, Enum):
    """Attribute entity types. Values are the backing table names."""

    DESIGNERS = "designers"
    MAKERS = "makers"
    CATEGORIES = "categories"
    SUBCATEGORIES = "subcategories"
    STYLES = "styles"
    PERIODS = "periods"
    COUNTRIES = "countries"
    COLORS = "colors"


@dataclass(frozen=True)
class AttributeFilter:
    """A slug filter that resolves to a product foreign key.

    Attributes:
        field: FilterState field carrying the slug
        kind: Attribute entity the slug belongs to
        product_column: Product column the resolved id constrains
    """

    field: str
    kind: AttributeKind
    product_column: str


# Filters the store can apply natively, in resolution order
FOREIGN_KEY_FILTERS: tuple[AttributeFilter, ...] = (
    AttributeFilter("designer", AttributeKind.DESIGNERS, "designer_id"),
    AttributeFilter("maker", AttributeKind.MAKERS, "maker_id"),
    AttributeFilter("category", AttributeKind.CATEGORIES, "category_id"),
    AttributeFilter("subcategory", AttributeKind.SUBCATEGORIES, "subcategory_id"),
    AttributeFilter("style", AttributeKind.STYLES, "style_id"),
    AttributeFilter("period", AttributeKind.PERIODS, "period_id"),
    AttributeFilter("country", AttributeKind.COUNTRIES, "country_id"),
)

# Color lives behind the product_colors join and is applied after the fetch
COLOR_FILTER = AttributeFilter("color", AttributeKind.COLORS, "colors")
