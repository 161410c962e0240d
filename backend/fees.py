"""
backend/fees.py

Platform transaction fee math for investments.

Amounts are plain numbers in a single currency (GHS). The fee is rounded to
a whole currency unit, half up, so it may differ from the unrounded
percentage by up to half a unit. net_amount(a, p) + calculate_fee(a, p)
equals a exactly for whole-number amounts; for fractional float amounts
the sum can be off by floating-point error (far below one minor unit).

Inputs are not validated: a negative amount yields a negative fee.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

try:
    from backend.config import DEFAULT_FEE_PERCENTAGE
except ModuleNotFoundError:
    from config import DEFAULT_FEE_PERCENTAGE

Number = Union[int, float]


@dataclass(frozen=True)
class FeeBreakdown:
    gross_amount: Number
    fee_percentage: float
    fee: int
    net_amount: Number


def calculate_fee(amount: Number, fee_percentage: float = DEFAULT_FEE_PERCENTAGE) -> int:
    """
    Platform fee for a gross investment amount.

    Example:
        calculate_fee(1000) -> 25
        calculate_fee(1000, 3) -> 30
    """
    return int(math.floor(amount * (fee_percentage / 100) + 0.5))


def net_amount(amount: Number, fee_percentage: float = DEFAULT_FEE_PERCENTAGE) -> Number:
    """Amount credited to the project after the platform fee."""
    return amount - calculate_fee(amount, fee_percentage)


def fee_breakdown(amount: Number, fee_percentage: float = DEFAULT_FEE_PERCENTAGE) -> FeeBreakdown:
    fee = calculate_fee(amount, fee_percentage)
    return FeeBreakdown(
        gross_amount=amount,
        fee_percentage=fee_percentage,
        fee=fee,
        net_amount=amount - fee,
    )
