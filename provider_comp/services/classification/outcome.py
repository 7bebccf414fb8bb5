"""
Outcome classification.

The closing dialog stores a coded result (RECUPERADO, NAO_RECUPERADO, ...)
plus an optional qualifier (COM_RASTREIO, SEM_RASTREIO, ...); older records
carry free text instead.  Both shapes normalize to the same vocabulary, so
the qualifier is simply appended before matching.
"""

from typing import Optional

from provider_comp.services.classification.text import contains_any, normalize
from provider_comp.taxonomy.constants import OUTCOME_KEYWORDS, OutcomeBucket


def classify_outcome(
    outcome_label: Optional[str],
    sub_outcome_label: Optional[str] = None,
) -> OutcomeBucket:
    outcome = normalize(outcome_label)
    if not outcome:
        # Not closed yet
        return OutcomeBucket.EM_ANDAMENTO

    text = f"{outcome} {normalize(sub_outcome_label)}".strip()
    for keywords, bucket in OUTCOME_KEYWORDS:
        if contains_any(text, keywords):
            return bucket
    return OutcomeBucket.OUTRO
