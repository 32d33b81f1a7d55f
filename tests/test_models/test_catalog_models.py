"""Tests for catalog models."""

from storefront.models import (
    Category,
    Color,
    Country,
    Designer,
    Maker,
    Period,
    Product,
    ProductImage,
    SiteSetting,
    Style,
    Subcategory,
    product_colors,
)


def test_attribute_tablenames():
    """Attribute models map to their plural tables."""
    assert Designer.__tablename__ == "designers"
    assert Maker.__tablename__ == "makers"
    assert Category.__tablename__ == "categories"
    assert Subcategory.__tablename__ == "subcategories"
    assert Style.__tablename__ == "styles"
    assert Period.__tablename__ == "periods"
    assert Country.__tablename__ == "countries"
    assert Color.__tablename__ == "colors"


def test_attributes_have_unique_slug():
    for model in (Designer, Maker, Category, Subcategory, Style, Period, Country, Color):
        assert model.__table__.columns["slug"].unique


def test_kind_specific_columns():
    assert "about" in {c.name for c in Designer.__table__.columns}
    assert "hex_code" in {c.name for c in Color.__table__.columns}
    assert "code" in {c.name for c in Country.__table__.columns}
    assert "category_id" in {c.name for c in Subcategory.__table__.columns}


def test_category_subcategories_relationship():
    assert "subcategories" in Category.__mapper__.relationships
    assert "category" in Subcategory.__mapper__.relationships


def test_product_tablename():
    assert Product.__tablename__ == "products"


def test_product_structured_dimensions():
    """Dimensions are numeric fields only; no free-text dimension strings."""
    columns = {c.name for c in Product.__table__.columns}
    for prefix in ("product", "box"):
        for axis in ("width", "height", "depth", "weight"):
            assert f"{prefix}_{axis}" in columns
    assert "dimension_notes" in columns
    assert "product_dimensions" not in columns
    assert "box_dimensions" not in columns


def test_product_foreign_keys():
    columns = {c.name for c in Product.__table__.columns}
    for column in (
        "designer_id", "maker_id", "category_id", "subcategory_id",
        "style_id", "period_id", "country_id",
    ):
        assert column in columns


def test_product_relationships_load_eagerly():
    relationships = Product.__mapper__.relationships
    for name in (
        "designer", "maker", "category", "subcategory", "style",
        "period", "country", "colors", "images",
    ):
        assert name in relationships
        assert relationships[name].lazy == "selectin"


def test_product_colors_join_table():
    assert {c.name for c in product_colors.columns} == {"product_id", "color_id"}
    assert {c.name for c in product_colors.primary_key} == {"product_id", "color_id"}


def test_product_image_columns():
    assert ProductImage.__tablename__ == "product_images"
    columns = {c.name for c in ProductImage.__table__.columns}
    assert {"product_id", "image_url", "alt_text", "sort_order"} <= columns


def test_site_setting_table():
    assert SiteSetting.__tablename__ == "settings"
    assert {"key", "value"} <= {c.name for c in SiteSetting.__table__.columns}
