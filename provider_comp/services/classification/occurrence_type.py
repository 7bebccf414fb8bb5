"""Occurrence type classification: ordered keyword containment, first match wins."""

from typing import Optional

from provider_comp.services.classification.text import contains_any, normalize
from provider_comp.taxonomy.constants import TYPE_KEYWORDS, TypeCategory


def classify_occurrence_type(type_label: Optional[str]) -> TypeCategory:
    text = normalize(type_label)
    if not text:
        return TypeCategory.OUTRO
    for keywords, category in TYPE_KEYWORDS:
        if contains_any(text, keywords):
            return category
    return TypeCategory.OUTRO
