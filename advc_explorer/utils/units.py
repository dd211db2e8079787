"""Coin unit conversion."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

# Smallest units per whole coin
SATOSHIS_PER_COIN = Decimal('100000000')


def to_smallest_unit(value: Union[int, float, str, Decimal, None]) -> int:
    """Convert a node-reported coin amount to smallest units."""
    if value is None:
        return 0
    amount = Decimal(str(value)) * SATOSHIS_PER_COIN
    return int(amount.to_integral_value(rounding=ROUND_HALF_UP))


def from_smallest_unit(amount: Union[int, Decimal, None]) -> Decimal:
    """Convert smallest units to whole coins."""
    if not amount:
        return Decimal('0')
    return Decimal(amount) / SATOSHIS_PER_COIN
