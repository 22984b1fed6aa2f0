"""Decimal money helpers shared by pricing, quote storage and reporting"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Annotated, Union

from pydantic import PlainSerializer

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: Union[str, int, float, Decimal, None]) -> Decimal:
    """
    Convert a catalog or stored value to Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1") rather than its
    binary expansion.
    """
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        value = str(value)
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Invalid currency value: {value!r}") from e


def round2(value: Decimal) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(value: Decimal) -> str:
    """Fixed-point string with exactly two fraction digits, no currency symbol"""
    return f"{round2(value):.2f}"


def format_gbp(value: Union[str, Decimal]) -> str:
    """Presentation-only rendering with the currency symbol"""
    return f"£{round2(to_decimal(value)):,.2f}"


# Decimal in Python, fixed 2-dp string when dumped as JSON
Money = Annotated[Decimal, PlainSerializer(format_money, return_type=str, when_used="json")]
