"""Tests for rate table resolution."""

import pytest
from decimal import Decimal

from provider_comp.services.compensation.rate_table import (
    RATE_RULES,
    resolve_rate_card,
    resolve_rule,
)
from provider_comp.taxonomy.constants import MacroRegion, OutcomeBucket, TypeCategory

CAPITAL = MacroRegion.CAPITAL
GRANDE_SP = MacroRegion.GRANDE_SP
INTERIOR = MacroRegion.INTERIOR
OUTROS = MacroRegion.OUTROS_ESTADOS


class TestResolveRateCard:
    def test_capital_theft_recovered(self):
        card = resolve_rate_card(TypeCategory.ROUBO_FURTO, CAPITAL, OutcomeBucket.RECUPERADO)
        assert card.base_fee == Decimal("150.00")
        assert card.free_hours == Decimal("3")
        assert card.hourly_overage_rate == Decimal("30.00")
        assert card.free_km == Decimal("50")
        assert card.km_overage_rate == Decimal("1.00")

    @pytest.mark.parametrize(
        "type_category,region,outcome,base_fee,hourly",
        [
            (TypeCategory.ANTENISTA, CAPITAL, OutcomeBucket.CANCELADO, "250.00", "30.00"),
            (TypeCategory.ANTENISTA, OUTROS, OutcomeBucket.RECUPERADO, "250.00", "35.00"),
            (TypeCategory.ROUBO_FURTO, GRANDE_SP, OutcomeBucket.OUTRO, "150.00", "30.00"),
            (TypeCategory.ROUBO_FURTO, INTERIOR, OutcomeBucket.RECUPERADO, "200.00", "35.00"),
            (TypeCategory.ROUBO_FURTO, OUTROS, OutcomeBucket.NAO_RECUPERADO, "200.00", "35.00"),
            (TypeCategory.SUSPEITA, CAPITAL, OutcomeBucket.LOCALIZADO, "150.00", "30.00"),
            (TypeCategory.SUSPEITA, INTERIOR, OutcomeBucket.NAO_RECUPERADO, "200.00", "35.00"),
            (TypeCategory.PRESERVACAO, GRANDE_SP, OutcomeBucket.EM_ANDAMENTO, "200.00", "30.00"),
            (TypeCategory.PRESERVACAO, INTERIOR, OutcomeBucket.CANCELADO, "200.00", "35.00"),
            (TypeCategory.APROPRIACAO, CAPITAL, OutcomeBucket.RECUPERADO, "200.00", "30.00"),
            (TypeCategory.APROPRIACAO, GRANDE_SP, OutcomeBucket.NAO_RECUPERADO, "100.00", "30.00"),
            (TypeCategory.APROPRIACAO, CAPITAL, OutcomeBucket.CANCELADO, "100.00", "30.00"),
            (TypeCategory.APROPRIACAO, INTERIOR, OutcomeBucket.RECUPERADO, "250.00", "35.00"),
            (TypeCategory.APROPRIACAO, OUTROS, OutcomeBucket.NAO_RECUPERADO, "100.00", "35.00"),
            (TypeCategory.APROPRIACAO, INTERIOR, OutcomeBucket.LOCALIZADO, "100.00", "35.00"),
            (TypeCategory.SIMPLES_VERIFICACAO, CAPITAL, OutcomeBucket.OUTRO, "100.00", "30.00"),
            (TypeCategory.SIMPLES_VERIFICACAO, OUTROS, OutcomeBucket.RECUPERADO, "100.00", "35.00"),
        ],
    )
    def test_priced_combinations(self, type_category, region, outcome, base_fee, hourly):
        card = resolve_rate_card(type_category, region, outcome)
        assert card is not None
        assert card.base_fee == Decimal(base_fee)
        assert card.hourly_overage_rate == Decimal(hourly)

    @pytest.mark.parametrize(
        "type_category,region,outcome",
        [
            (TypeCategory.OUTRO, CAPITAL, OutcomeBucket.RECUPERADO),
            (TypeCategory.OUTRO, OUTROS, OutcomeBucket.OUTRO),
            (TypeCategory.ROUBO_FURTO, INTERIOR, OutcomeBucket.CANCELADO),
            (TypeCategory.SUSPEITA, OUTROS, OutcomeBucket.EM_ANDAMENTO),
            (TypeCategory.APROPRIACAO, INTERIOR, OutcomeBucket.CANCELADO),
            (TypeCategory.APROPRIACAO, OUTROS, OutcomeBucket.EM_ANDAMENTO),
        ],
    )
    def test_unpriced_combinations_have_no_rule(self, type_category, region, outcome):
        assert resolve_rule(type_category, region, outcome) is None
        assert resolve_rate_card(type_category, region, outcome) is None

    def test_resolution_is_deterministic(self):
        first = resolve_rate_card(TypeCategory.PRESERVACAO, INTERIOR, OutcomeBucket.RECUPERADO)
        second = resolve_rate_card(TypeCategory.PRESERVACAO, INTERIOR, OutcomeBucket.RECUPERADO)
        assert first == second


class TestRateTableShape:
    def test_rule_ids_unique(self):
        ids = [rule.rule_id for rule in RATE_RULES]
        assert len(ids) == len(set(ids))

    def test_every_rule_is_priced_and_non_negative(self):
        for rule in RATE_RULES:
            assert rule.base_fee >= 0
            assert rule.hourly_overage_rate >= 0
            assert rule.free_hours == Decimal("3")
            assert rule.free_km == Decimal("50")

    def test_metro_rules_charge_thirty_per_hour(self):
        for rule in RATE_RULES:
            if CAPITAL in rule.regions:
                assert GRANDE_SP in rule.regions
                assert rule.hourly_overage_rate == Decimal("30.00")
            else:
                assert rule.regions == frozenset({INTERIOR, OUTROS})
                assert rule.hourly_overage_rate == Decimal("35.00")

    def test_at_most_one_rule_per_combination(self):
        for type_category in TypeCategory:
            for region in MacroRegion:
                for outcome in OutcomeBucket:
                    hits = [r for r in RATE_RULES if r.matches(type_category, region, outcome)]
                    assert len(hits) <= 1, (type_category, region, outcome)
