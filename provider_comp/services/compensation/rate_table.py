"""
Provider rate table: one declarative list, consulted from one place.

Each RateRule is keyed by (TypeCategory, set of MacroRegions, set of
OutcomeBuckets or "any").  resolve_rule() walks RATE_RULES top to bottom and
returns the first rule whose three keys all match; resolve_rate_card() turns
it into a fresh RateCard.  No match is the "no rule" signal (None): the
calculator then pays the provider's registered rates with no overage.

Every rule shares the same franchise: 3 free hours, 50 free km, R$ 1.00 per
extra km.  Hourly overage is R$ 30.00 in the São Paulo metro area
(CAPITAL + GRANDE_SP) and R$ 35.00 elsewhere.

Combinations the business never priced (e.g. ROUBO_FURTO outside the metro
area with a CANCELADO result) are deliberately absent.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from provider_comp.services.compensation.base import RateCard
from provider_comp.taxonomy.constants import (
    OUTSIDE_METRO,
    SAO_PAULO_METRO,
    MacroRegion,
    OutcomeBucket,
    TypeCategory,
)

logger = logging.getLogger(__name__)

FREE_HOURS = Decimal("3")
FREE_KM = Decimal("50")
KM_OVERAGE_RATE = Decimal("1.00")

METRO_HOURLY_RATE = Decimal("30.00")
OUTSIDE_HOURLY_RATE = Decimal("35.00")

_RECOVERY_RESULTS = frozenset({OutcomeBucket.RECUPERADO, OutcomeBucket.NAO_RECUPERADO})


@dataclass(frozen=True)
class RateRule:
    rule_id: str
    type_category: TypeCategory
    regions: frozenset[MacroRegion]
    outcomes: Optional[frozenset[OutcomeBucket]]  # None = any outcome
    base_fee: Decimal
    hourly_overage_rate: Decimal
    free_hours: Decimal = FREE_HOURS
    free_km: Decimal = FREE_KM
    km_overage_rate: Decimal = KM_OVERAGE_RATE

    def matches(
        self, type_category: TypeCategory, region: MacroRegion, outcome: OutcomeBucket
    ) -> bool:
        if type_category != self.type_category or region not in self.regions:
            return False
        return self.outcomes is None or outcome in self.outcomes

    def to_card(self) -> RateCard:
        return RateCard(
            base_fee=self.base_fee,
            free_hours=self.free_hours,
            hourly_overage_rate=self.hourly_overage_rate,
            free_km=self.free_km,
            km_overage_rate=self.km_overage_rate,
        )


def _metro_and_outside(
    rule_id: str,
    type_category: TypeCategory,
    base_fee: str,
) -> tuple[RateRule, RateRule]:
    """Same base fee everywhere; only the hourly rate follows the region."""
    return (
        RateRule(
            rule_id=f"{rule_id}.METRO",
            type_category=type_category,
            regions=SAO_PAULO_METRO,
            outcomes=None,
            base_fee=Decimal(base_fee),
            hourly_overage_rate=METRO_HOURLY_RATE,
        ),
        RateRule(
            rule_id=f"{rule_id}.OUTSIDE",
            type_category=type_category,
            regions=OUTSIDE_METRO,
            outcomes=None,
            base_fee=Decimal(base_fee),
            hourly_overage_rate=OUTSIDE_HOURLY_RATE,
        ),
    )


RATE_RULES: tuple[RateRule, ...] = (
    # ── Antenista ─────────────────────────────────────────────────────────────
    *_metro_and_outside("ANTENISTA", TypeCategory.ANTENISTA, "250.00"),
    # ── Roubo / Furto ─────────────────────────────────────────────────────────
    RateRule(
        rule_id="ROUBO_FURTO.METRO",
        type_category=TypeCategory.ROUBO_FURTO,
        regions=SAO_PAULO_METRO,
        outcomes=None,
        base_fee=Decimal("150.00"),
        hourly_overage_rate=METRO_HOURLY_RATE,
    ),
    RateRule(
        rule_id="ROUBO_FURTO.OUTSIDE",
        type_category=TypeCategory.ROUBO_FURTO,
        regions=OUTSIDE_METRO,
        outcomes=_RECOVERY_RESULTS,
        base_fee=Decimal("200.00"),
        hourly_overage_rate=OUTSIDE_HOURLY_RATE,
    ),
    # ── Suspeita (priced like Roubo/Furto) ────────────────────────────────────
    RateRule(
        rule_id="SUSPEITA.METRO",
        type_category=TypeCategory.SUSPEITA,
        regions=SAO_PAULO_METRO,
        outcomes=None,
        base_fee=Decimal("150.00"),
        hourly_overage_rate=METRO_HOURLY_RATE,
    ),
    RateRule(
        rule_id="SUSPEITA.OUTSIDE",
        type_category=TypeCategory.SUSPEITA,
        regions=OUTSIDE_METRO,
        outcomes=_RECOVERY_RESULTS,
        base_fee=Decimal("200.00"),
        hourly_overage_rate=OUTSIDE_HOURLY_RATE,
    ),
    # ── Preservação ───────────────────────────────────────────────────────────
    *_metro_and_outside("PRESERVACAO", TypeCategory.PRESERVACAO, "200.00"),
    # ── Apropriação ───────────────────────────────────────────────────────────
    RateRule(
        rule_id="APROPRIACAO.METRO.RECUPERADO",
        type_category=TypeCategory.APROPRIACAO,
        regions=SAO_PAULO_METRO,
        outcomes=frozenset({OutcomeBucket.RECUPERADO}),
        base_fee=Decimal("200.00"),
        hourly_overage_rate=METRO_HOURLY_RATE,
    ),
    RateRule(
        rule_id="APROPRIACAO.METRO.OTHER_RESULT",
        type_category=TypeCategory.APROPRIACAO,
        regions=SAO_PAULO_METRO,
        outcomes=frozenset(OutcomeBucket) - {OutcomeBucket.RECUPERADO},
        base_fee=Decimal("100.00"),
        hourly_overage_rate=METRO_HOURLY_RATE,
    ),
    RateRule(
        rule_id="APROPRIACAO.OUTSIDE.RECUPERADO",
        type_category=TypeCategory.APROPRIACAO,
        regions=OUTSIDE_METRO,
        outcomes=frozenset({OutcomeBucket.RECUPERADO}),
        base_fee=Decimal("250.00"),
        hourly_overage_rate=OUTSIDE_HOURLY_RATE,
    ),
    RateRule(
        rule_id="APROPRIACAO.OUTSIDE.NAO_RECUPERADO",
        type_category=TypeCategory.APROPRIACAO,
        regions=OUTSIDE_METRO,
        outcomes=frozenset({OutcomeBucket.NAO_RECUPERADO, OutcomeBucket.LOCALIZADO}),
        base_fee=Decimal("100.00"),
        hourly_overage_rate=OUTSIDE_HOURLY_RATE,
    ),
    # ── Simples verificação ───────────────────────────────────────────────────
    *_metro_and_outside(
        "SIMPLES_VERIFICACAO", TypeCategory.SIMPLES_VERIFICACAO, "100.00"
    ),
)


def resolve_rule(
    type_category: TypeCategory, region: MacroRegion, outcome: OutcomeBucket
) -> Optional[RateRule]:
    """First rule matching all three keys, or None."""
    for rule in RATE_RULES:
        if rule.matches(type_category, region, outcome):
            return rule
    logger.debug(
        "No rate rule for type=%s region=%s outcome=%s",
        type_category.value,
        region.value,
        outcome.value,
    )
    return None


def resolve_rate_card(
    type_category: TypeCategory, region: MacroRegion, outcome: OutcomeBucket
) -> Optional[RateCard]:
    """Fresh RateCard for the combination, or None when the table has no rule."""
    rule = resolve_rule(type_category, region, outcome)
    return rule.to_card() if rule is not None else None
