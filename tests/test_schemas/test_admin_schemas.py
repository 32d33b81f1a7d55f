"""Tests for back-office schemas."""

import pytest
from pydantic import ValidationError

from storefront.schemas.admin import AttributeIn, ProductIn, ProductPatch, normalize_tags


class TestAttributeIn:
    def test_valid(self):
        attribute = AttributeIn(name=" Mid-Century ", slug="mid-century")

        assert attribute.name == "Mid-Century"

    @pytest.mark.parametrize("slug", ["Mid Century", "mid--century", "-mid", "mid_century"])
    def test_invalid_slug(self, slug):
        with pytest.raises(ValidationError):
            AttributeIn(name="Mid Century", slug=slug)

    def test_invalid_hex(self):
        with pytest.raises(ValidationError):
            AttributeIn(name="Red", slug="red", hex_code="red")


class TestNormalizeTags:
    def test_strips_and_dedupes(self):
        assert normalize_tags([" teak ", "brass", "", "teak"]) == ["teak", "brass"]


class TestProductIn:
    def test_defaults(self):
        product = ProductIn(name="Lamp", slug="lamp")

        assert product.status == "available"
        assert product.tags == []
        assert product.color_ids == []

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            ProductIn(name="Lamp", slug="lamp", price=-1)

    def test_tags_normalized(self):
        assert ProductIn(name="Lamp", slug="lamp", tags=["a", " a "]).tags == ["a"]


class TestProductPatch:
    def test_only_sent_fields_dumped(self):
        patch = ProductPatch(price=100)

        assert patch.model_dump(exclude_unset=True) == {"price": 100}

    def test_slug_still_validated(self):
        with pytest.raises(ValidationError):
            ProductPatch(slug="Not A Slug")

    def test_tags_cleaned(self):
        assert ProductPatch(tags=["x", "x"]).tags == ["x"]
