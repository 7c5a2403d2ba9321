"""Decimal helpers for monetary amounts and shares."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")

# Orders of magnitude accepted as amounts: 10**-18 up to 10**18
MAX_EXPONENT = 18

# Wide enough to quantize any ratio of two accepted amounts
_SHARE_CONTEXT = Context(prec=60)


def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    """Convert loosely typed input to a finite Decimal.

    Accepts ints, floats, Decimals and numeric strings. Thousands separators
    and surrounding whitespace are stripped. Anything else, including NaN,
    infinities and magnitudes outside 10**-18 .. 10**18, yields ``default``.

    Example:
        ```python
        assert to_decimal("1,500,000") == Decimal("1500000")
        assert to_decimal("abc") == Decimal("0")
        assert to_decimal(None, default=Decimal("1")) == Decimal("1")
        ```
    """
    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        # repr keeps the shortest round-tripping form (0.1 -> "0.1")
        result = Decimal(repr(value))
    elif isinstance(value, str):
        text = value.strip().replace(",", "").replace(" ", "")
        if not text:
            return default
        try:
            result = Decimal(text)
        except InvalidOperation:
            return default
    else:
        return default

    if not result.is_finite() or (result and abs(result.adjusted()) > MAX_EXPONENT):
        return default
    return result


def calculate_percentage(amount: Any, total: Any) -> Decimal:
    """Share of ``amount`` in ``total`` as a percentage, rounded to 2 places.

    Returns 0 when ``total`` is not positive.
    """
    total_value = to_decimal(total)
    if total_value <= 0:
        return ZERO
    share = to_decimal(amount) / total_value * HUNDRED
    return share.quantize(CENT, rounding=ROUND_HALF_UP, context=_SHARE_CONTEXT)


def round_amount(value: Decimal, places: int = 0) -> Decimal:
    """Round half-up to ``places`` decimal places."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def format_amount(value: Any) -> str:
    """Render an amount with thousands separators for messages."""
    amount = to_decimal(value)
    if amount == amount.to_integral_value():
        return f"{amount:,.0f}"
    return f"{amount:,.2f}"


def format_percentage(value: Decimal) -> str:
    """Render a share without trailing zeros (``12.50`` -> ``12.5``)."""
    text = f"{value.quantize(CENT, rounding=ROUND_HALF_UP, context=_SHARE_CONTEXT):f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
