"""
Value types that flow through the compensation engine.

All of them are frozen dataclasses built fresh for each calculation:
OccurrenceFacts in, CompensationBreakdown out, RateCard in between.
Money is Decimal throughout.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from provider_comp.taxonomy.constants import MacroRegion, OutcomeBucket, TypeCategory

ZERO = Decimal("0.00")

# Largest magnitude accepted for any reading or amount.  Keeps every sum and
# product of the calculation within the default 28-digit context, so
# quantizing to cents cannot overflow.
MAX_MAGNITUDE = Decimal("1e15")


def coerce_decimal(value: Any) -> Optional[Decimal]:
    """
    Best-effort Decimal for a number as the operators typed it.

    Accepts Decimal/int/float and numeric strings, including "R$" prefixes
    and Brazilian formatting ("1.234,56").  Returns None for anything else:
    booleans, NaN/infinite values, magnitudes of MAX_MAGNITUDE or more, and
    strings whose separators are in US order ("1,234.56").
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, (int, float)):
        number = Decimal(str(value))
    elif isinstance(value, str):
        cleaned = value.strip().replace("R$", "").replace(" ", "")
        if "," in cleaned:
            if cleaned.rfind(".") > cleaned.rfind(","):
                return None
            cleaned = cleaned.replace(".", "").replace(",", ".")
        if not cleaned:
            return None
        try:
            number = Decimal(cleaned)
        except InvalidOperation:
            return None
    else:
        return None
    if not number.is_finite() or abs(number) >= MAX_MAGNITUDE:
        return None
    return number


class DataQualityWarning:
    """Codes attached to a breakdown when input data looked wrong."""

    NEGATIVE_DISTANCE = "NEGATIVE_DISTANCE"  # km_final < km_inicial
    INVALID_INTERVAL = "INVALID_INTERVAL"  # termino before chegada, or mixed tz
    MALFORMED_EXPENSE = "MALFORMED_EXPENSE"  # amount not a non-negative number
    INVALID_FALLBACK_RATE = "INVALID_FALLBACK_RATE"
    NO_RATE_RULE = "NO_RATE_RULE"  # paid from the provider's registered rates


@dataclass(frozen=True)
class ExpenseEntry:
    # amount is kept as delivered; the aggregator decides whether it is usable
    category: str
    amount: Any


@dataclass(frozen=True)
class RawFallback:
    """Provider's registered default rates (valor_acionamento / _hora_adc / _km_adc)."""

    base_fee: Optional[Decimal] = None
    hourly_rate: Optional[Decimal] = None
    km_rate: Optional[Decimal] = None


@dataclass(frozen=True)
class OccurrenceFacts:
    type_label: str = ""
    state_label: str = ""
    city_label: str = ""
    outcome_label: str = ""
    sub_outcome_label: Optional[str] = None
    arrived_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    odometer_start: Optional[Decimal] = None
    odometer_end: Optional[Decimal] = None
    expenses: tuple[ExpenseEntry, ...] = ()
    raw_fallback: RawFallback = field(default_factory=RawFallback)


@dataclass(frozen=True)
class RateCard:
    base_fee: Decimal
    free_hours: Decimal
    hourly_overage_rate: Decimal
    free_km: Decimal
    km_overage_rate: Decimal


@dataclass(frozen=True)
class CompensationBreakdown:
    base_fee: Decimal
    hour_overage_amount: Decimal
    km_overage_amount: Decimal
    expenses_total: Decimal
    total: Decimal

    # Diagnostics: how the amounts were reached
    region: MacroRegion
    type_category: TypeCategory
    outcome: OutcomeBucket
    rule_id: Optional[str] = None
    minutes: Optional[int] = None
    distance: Optional[Decimal] = None
    warnings: tuple[str, ...] = ()

    @property
    def rule_applied(self) -> bool:
        return self.rule_id is not None

    def as_export_row(self) -> dict[str, Decimal]:
        """Flat row in the shape the reporting/export screens consume."""
        return {
            "valor_acionamento": self.base_fee,
            "valor_hora_adc": self.hour_overage_amount,
            "valor_km_adc": self.km_overage_amount,
            "despesas": self.expenses_total,
            "total": self.total,
        }
