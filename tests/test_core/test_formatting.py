"""Tests for price and dimension formatting."""

from decimal import Decimal

import pytest

from storefront.core.formatting import PRICE_ON_REQUEST, format_dimensions, format_price


class TestFormatDimensions:
    """Tests for format_dimensions."""

    def test_full_dimensions_with_weight(self):
        assert format_dimensions(24, 30, 18, 40) == '24"W × 30"H × 18"D • 40 lbs'

    def test_decimal_values_drop_trailing_zeros(self):
        assert format_dimensions(Decimal("24.50"), Decimal("30.00"), None) == '24.5"W × 30"H'

    def test_weight_only(self):
        assert format_dimensions(None, None, None, 12) == "12 lbs"

    def test_zero_values_omitted(self):
        assert format_dimensions(0, 30, 0, 0) == '30"H'

    def test_nothing_set(self):
        assert format_dimensions(None, None, None) is None


class TestFormatPrice:
    """Tests for format_price."""

    @pytest.mark.parametrize("price", [None, 0, Decimal("0.00")])
    def test_price_on_request(self, price):
        assert format_price(price) == PRICE_ON_REQUEST

    def test_whole_amount(self):
        assert format_price(Decimal("1200.00")) == "$1,200"

    def test_cents_kept(self):
        assert format_price(Decimal("1234.56")) == "$1,234.56"
