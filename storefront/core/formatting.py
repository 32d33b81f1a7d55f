"""Display formatting for prices and structured dimensions."""

from decimal import Decimal

PRICE_ON_REQUEST = "Price on request"

Number = Decimal | float | int


def _format_number(value: Number) -> str:
    """Render a number without trailing zeros (24.00 -> 24, 24.50 -> 24.5)."""
    d = Decimal(str(value))
    if d == d.to_integral_value():
        return str(int(d))
    return format(d.normalize(), "f")


def format_dimensions(
    width: Number | None,
    height: Number | None,
    depth: Number | None,
    weight: Number | None = None,
) -> str | None:
    """Format inches and pounds for display.

    Zero or missing measurements are left out.

    Examples:
        >>> format_dimensions(24, 30, 18, 40)
        '24"W × 30"H × 18"D • 40 lbs'
        >>> format_dimensions(None, None, None, 12)
        '12 lbs'

    Returns:
        Display string, or None when nothing is set
    """
    parts = [
        f'{_format_number(value)}"{axis}'
        for value, axis in ((width, "W"), (height, "H"), (depth, "D"))
        if value
    ]
    dims = " × ".join(parts)
    if weight:
        weight_text = f"{_format_number(weight)} lbs"
        return f"{dims} • {weight_text}" if dims else weight_text
    return dims or None


def format_price(price: Number | None) -> str:
    """Format a USD price; absent or zero prices read "Price on request"."""
    if not price:
        return PRICE_ON_REQUEST
    amount = Decimal(str(price)).quantize(Decimal("0.01"))
    if amount == amount.to_integral_value():
        return f"${int(amount):,}"
    return f"${amount:,.2f}".rstrip("0")
