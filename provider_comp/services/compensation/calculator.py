"""
Compensation Calculator: deterministic and pure.

Given one occurrence's facts, works out what the field provider is owed:

  1. Classify region (state + city), occurrence type, and outcome
  2. Resolve the rate card for that (type, region, outcome)
  3. No rule → provider's registered base fee, no overage
     Rule    → card base fee
               + hourly overage beyond the free hours (arrival → completion)
               + km overage beyond the free km (odometer start → end)
  4. Add itemized expenses
  5. total = base fee + hour overage + km overage + expenses

Design principle: pure function, never raises.  Occurrences are often only
partly filled in, so every missing or inconsistent input has a fallback and
is reported through `warnings` on the breakdown instead of an exception.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

from provider_comp.services.classification.occurrence_type import (
    classify_occurrence_type,
)
from provider_comp.services.classification.outcome import classify_outcome
from provider_comp.services.classification.region import classify_region
from provider_comp.services.compensation.base import (
    ZERO,
    CompensationBreakdown,
    DataQualityWarning,
    OccurrenceFacts,
    coerce_decimal,
)
from provider_comp.services.compensation.expenses import count_malformed, sum_expenses
from provider_comp.services.compensation.measures import (
    distance_between,
    franchise_overage,
    minutes_between,
)
from provider_comp.services.compensation.rate_table import resolve_rule

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
MINUTES_PER_HOUR = Decimal("60")


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def compute_compensation(facts: OccurrenceFacts) -> CompensationBreakdown:
    """Full compensation breakdown for one occurrence."""
    warnings: list[str] = []

    region = classify_region(facts.state_label, facts.city_label)
    type_category = classify_occurrence_type(facts.type_label)
    outcome = classify_outcome(facts.outcome_label, facts.sub_outcome_label)

    minutes = minutes_between(facts.arrived_at, facts.completed_at)
    if minutes is None and facts.arrived_at is not None and facts.completed_at is not None:
        warnings.append(DataQualityWarning.INVALID_INTERVAL)
        logger.warning(
            "Unusable service interval %s → %s; hour overage set to zero",
            facts.arrived_at,
            facts.completed_at,
        )

    distance = distance_between(facts.odometer_start, facts.odometer_end)
    if distance is not None and distance < 0:
        # Clamped to zero by the franchise math below, but surfaced to the caller
        warnings.append(DataQualityWarning.NEGATIVE_DISTANCE)
        logger.warning(
            "Odometer went backwards (%s → %s); km overage set to zero",
            facts.odometer_start,
            facts.odometer_end,
        )

    # ── Rate card or registered-rate fallback ─────────────────────────────────
    rule = resolve_rule(type_category, region, outcome)

    if rule is None:
        warnings.append(DataQualityWarning.NO_RATE_RULE)
        base_fee = coerce_decimal(facts.raw_fallback.base_fee)
        if base_fee is None or base_fee < 0:
            if facts.raw_fallback.base_fee is not None:
                warnings.append(DataQualityWarning.INVALID_FALLBACK_RATE)
            base_fee = ZERO
        hour_overage = ZERO
        km_overage = ZERO
    else:
        card = rule.to_card()
        base_fee = card.base_fee
        hour_overage = ZERO
        if minutes is not None:
            hours = Decimal(minutes) / MINUTES_PER_HOUR
            hour_overage = franchise_overage(
                hours, card.free_hours, card.hourly_overage_rate
            )
        km_overage = ZERO
        if distance is not None:
            km_overage = franchise_overage(distance, card.free_km, card.km_overage_rate)

    # ── Expenses ──────────────────────────────────────────────────────────────
    expenses_total = sum_expenses(facts.expenses)
    malformed = count_malformed(facts.expenses)
    if malformed:
        warnings.append(DataQualityWarning.MALFORMED_EXPENSE)
        logger.warning("%d malformed expense entries left out of the total", malformed)

    base_fee = _money(base_fee)
    hour_overage = _money(hour_overage)
    km_overage = _money(km_overage)
    expenses_total = _money(expenses_total)
    total = base_fee + hour_overage + km_overage + expenses_total

    logger.debug(
        "Compensation: type=%s region=%s outcome=%s rule=%s total=%s",
        type_category.value,
        region.value,
        outcome.value,
        rule.rule_id if rule else None,
        total,
    )

    return CompensationBreakdown(
        base_fee=base_fee,
        hour_overage_amount=hour_overage,
        km_overage_amount=km_overage,
        expenses_total=expenses_total,
        total=total,
        region=region,
        type_category=type_category,
        outcome=outcome,
        rule_id=rule.rule_id if rule else None,
        minutes=minutes,
        distance=distance,
        warnings=tuple(warnings),
    )
