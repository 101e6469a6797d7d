from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

ZERO = Decimal("0")
WHOLE_UNIT = Decimal("1")


def to_decimal(value: Decimal | int | float | str | None) -> Decimal:
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    try:
        # str() keeps float inputs like 0.1 from dragging binary noise along
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Not a valid amount: {value!r}") from e


def round_currency(value: Decimal) -> Decimal:
    """Round to a whole currency unit, half-up."""
    return value.quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP)
