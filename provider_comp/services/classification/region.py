"""
Macro-region classification.

Maps the free-text state/city typed on the occurrence (the approach/recovery
site) to one of four pricing tiers:

  1. state is not SP (after name → UF mapping)   → OUTROS_ESTADOS
  2. city contains "sao paulo"                   → CAPITAL
  3. city contains a Greater São Paulo municipality → GRANDE_SP
  4. anything else in SP                         → INTERIOR

Empty or unknown states fail open to OUTROS_ESTADOS.
"""

import logging
from typing import Optional

from provider_comp.services.classification.text import contains_any, normalize
from provider_comp.taxonomy.constants import (
    CAPITAL_CITY_KEYWORD,
    GRANDE_SP_CITIES,
    STATE_CODES,
    MacroRegion,
)

logger = logging.getLogger(__name__)


def state_code(state: Optional[str]) -> str:
    """Canonical UF for a state label ("São Paulo", "sp", "SP " → "SP"); "" if empty."""
    normalized = normalize(state)
    if not normalized:
        return ""
    return STATE_CODES.get(normalized, normalized.upper())


def classify_region(state: Optional[str], city: Optional[str]) -> MacroRegion:
    uf = state_code(state)
    if uf != "SP":
        return MacroRegion.OUTROS_ESTADOS

    city_normalized = normalize(city)
    if CAPITAL_CITY_KEYWORD in city_normalized:
        return MacroRegion.CAPITAL

    matched = contains_any(city_normalized, GRANDE_SP_CITIES)
    if matched is not None:
        logger.debug("City %r matched Greater SP entry %r", city, matched)
        return MacroRegion.GRANDE_SP

    return MacroRegion.INTERIOR
