"""Tests for macro-region classification."""

import pytest

from provider_comp.services.classification.region import classify_region, state_code
from provider_comp.taxonomy.constants import MacroRegion


class TestStateCode:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("SP", "SP"),
            ("sp ", "SP"),
            ("São Paulo", "SP"),
            ("Rio de Janeiro", "RJ"),
            ("minas gerais", "MG"),
            ("", ""),
            (None, ""),
        ],
    )
    def test_maps_names_and_codes(self, raw, expected):
        assert state_code(raw) == expected


class TestClassifyRegion:
    @pytest.mark.parametrize(
        "state,city,expected",
        [
            ("SP", "São Paulo", MacroRegion.CAPITAL),
            ("SP", "sao paulo - zona leste", MacroRegion.CAPITAL),
            ("São Paulo", "Guarulhos", MacroRegion.GRANDE_SP),
            ("SP", "São Bernardo do Campo", MacroRegion.GRANDE_SP),
            ("SP", "Embu-Guaçu", MacroRegion.GRANDE_SP),
            ("SP", "Poá", MacroRegion.GRANDE_SP),
            ("SP", "Campinas", MacroRegion.INTERIOR),
            ("SP", "Ribeirão Preto", MacroRegion.INTERIOR),
            ("SP", "", MacroRegion.INTERIOR),
            ("RJ", "Rio de Janeiro", MacroRegion.OUTROS_ESTADOS),
            ("MG", "São Paulo", MacroRegion.OUTROS_ESTADOS),
        ],
    )
    def test_tiers(self, state, city, expected):
        assert classify_region(state, city) == expected

    def test_other_state_wins_even_for_metro_city_name(self):
        assert classify_region("Paraná", "Osasco") == MacroRegion.OUTROS_ESTADOS

    @pytest.mark.parametrize("state", ["", None, "Atlantis"])
    def test_missing_or_unknown_state_fails_open(self, state):
        assert classify_region(state, "São Paulo") == MacroRegion.OUTROS_ESTADOS
