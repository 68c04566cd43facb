"""
Money helpers

Prices and totals are Decimal amounts rounded half-up to cents.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

CENT = Decimal("0.01")


def round_to_cents(value: Union[int, float, str, Decimal]) -> Decimal:
    """Round any numeric value half-up to two decimal places"""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)
