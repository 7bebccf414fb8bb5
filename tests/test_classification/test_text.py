"""Tests for label normalization."""

import pytest

from provider_comp.services.classification.text import contains_any, normalize


class TestNormalize:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("São Paulo", "sao paulo"),
            ("  APROPRIAÇÃO   Indébita ", "apropriacao indebita"),
            ("NAO_RECUPERADO", "nao recuperado"),
            ("Roubo/Furto", "roubo furto"),
            ("Embu-Guaçu", "embu guacu"),
            ("Poá", "poa"),
        ],
    )
    def test_folds_case_accents_and_punctuation(self, raw, expected):
        assert normalize(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "--"])
    def test_empty_input_gives_empty_string(self, raw):
        assert normalize(raw) == ""

    def test_idempotent(self):
        once = normalize("  Simples Verificação / Ç ")
        assert normalize(once) == once


class TestContainsAny:
    def test_returns_first_matching_keyword(self):
        assert contains_any("roubo e furto", ("furto", "roubo")) == "furto"

    def test_none_when_nothing_matches(self):
        assert contains_any("preservacao", ("roubo", "furto")) is None
