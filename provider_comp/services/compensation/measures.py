"""
Elapsed time, odometer distance and franchise overage.

minutes_between / distance_between never raise: anything that cannot be
measured comes back as None and the caller charges nothing for it.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional, Union

from provider_comp.services.compensation.base import coerce_decimal

Number = Union[Decimal, int, float]


def _to_decimal(value: Number) -> Decimal:
    # via str() so a float keeps its printed value (0.1, not 0.1000000000000000055...)
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def minutes_between(
    start: Optional[datetime], end: Optional[datetime]
) -> Optional[int]:
    """
    Whole minutes from `start` to `end` (floored).

    None when either side is missing, when `end` is before `start`, or when
    the two cannot be compared (one naive, one timezone-aware).
    """
    if start is None or end is None:
        return None
    try:
        elapsed = end - start
    except TypeError:
        return None
    seconds = elapsed.total_seconds()
    if seconds < 0:
        return None
    return int(seconds // 60)


def distance_between(odometer_start: Any, odometer_end: Any) -> Optional[Decimal]:
    """Odometer difference.  Negative results are returned as-is, not clamped."""
    start = coerce_decimal(odometer_start)
    end = coerce_decimal(odometer_end)
    if start is None or end is None:
        return None
    return end - start


def franchise_overage(
    quantity: Number, free_allowance: Number, unit_rate: Number
) -> Decimal:
    """
    Billable amount for `quantity` beyond `free_allowance`:
    max(0, quantity - free_allowance) * unit_rate.

    A quantity exactly at the allowance owes nothing.
    """
    excess = _to_decimal(quantity) - _to_decimal(free_allowance)
    if excess <= 0:
        return Decimal("0")
    return excess * _to_decimal(unit_rate)
