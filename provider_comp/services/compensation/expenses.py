"""Itemized expense (despesas) aggregation."""

import logging
from decimal import Decimal
from typing import Any, Iterable, Optional

from provider_comp.services.compensation.base import ZERO, ExpenseEntry, coerce_decimal

logger = logging.getLogger(__name__)


def expense_amount(value: Any) -> Optional[Decimal]:
    """Usable amount of one expense, or None when it must be left out of the sum."""
    amount = coerce_decimal(value)
    if amount is None or amount < 0:
        return None
    return amount


def sum_expenses(expenses: Iterable[ExpenseEntry]) -> Decimal:
    """Sum of every usable expense amount; malformed entries are skipped."""
    total = ZERO
    for entry in expenses:
        amount = expense_amount(entry.amount)
        if amount is None:
            logger.debug("Skipping malformed expense %r: %r", entry.category, entry.amount)
            continue
        total += amount
    return total


def count_malformed(expenses: Iterable[ExpenseEntry]) -> int:
    return sum(1 for entry in expenses if expense_amount(entry.amount) is None)
