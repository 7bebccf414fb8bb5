"""
Occurrence record → OccurrenceFacts.

The data-access layer hands occurrences over as plain dicts with the
application's Portuguese field names (tipo, estado, cidade, resultado,
chegada, termino, km_inicial, despesas_detalhadas, valor_acionamento, ...).
Values arrive in whatever shape the forms saved them: ISO strings, "nan",
"1.234,56", JSON-encoded expense lists.  Everything is coerced leniently
here so the calculator only ever sees typed, immutable facts.

Never raises: an unusable value becomes None (or is dropped) and the
calculator's fallbacks take over from there.
"""

import json
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping, Optional

from dateutil import parser as date_parser

from provider_comp.services.compensation.base import (
    ExpenseEntry,
    OccurrenceFacts,
    RawFallback,
    coerce_decimal,
)

logger = logging.getLogger(__name__)

_EMPTY_MARKERS = ("", "nan", "nat", "none", "null", "n/a", "-")

LEGACY_EXPENSE_CATEGORY = "Outros"


def clean_str(value: Any) -> Optional[str]:
    """Strip and normalize a string value; return None if empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text if text.lower() not in _EMPTY_MARKERS else None


def to_decimal(value: Any) -> Optional[Decimal]:
    if isinstance(value, str) and clean_str(value) is None:
        return None
    return coerce_decimal(value)


def to_datetime(value: Any) -> Optional[datetime]:
    """
    Parse an instant.  Returns None on failure.

    A bare `date` object is rejected: it says nothing about the time of
    arrival or completion.  Strings go through ISO 8601 first, then the
    day-first formats the operators type ("01/05/2024 10:30").
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return None
    text = clean_str(value)
    if text is None:
        return None
    try:
        return date_parser.isoparse(text)
    except (ValueError, OverflowError):
        pass
    try:
        return date_parser.parse(text, dayfirst=True)
    except (ValueError, OverflowError):
        logger.debug("Unparseable timestamp %r", value)
        return None


def parse_expenses(detailed: Any, legacy_total: Any = None) -> tuple[ExpenseEntry, ...]:
    """
    Itemized expenses from `despesas_detalhadas`.

    Accepts a list or its JSON encoding; entries may use the form's keys
    ({tipo, valor}) or {category, amount}.  Amounts are passed through
    untouched; the calculator decides what is usable.  When there is no
    itemized list but the legacy scalar `despesas` is positive, it becomes
    a single "Outros" entry.
    """
    items = detailed
    if isinstance(items, str):
        text = items.strip()
        try:
            items = json.loads(text) if text else []
        except (ValueError, RecursionError):  # JSONDecodeError, or nesting too deep
            logger.warning("despesas_detalhadas is not valid JSON: %.80r", text)
            items = []

    entries: list[ExpenseEntry] = []
    if isinstance(items, (list, tuple)):
        for item in items:
            if isinstance(item, ExpenseEntry):
                entries.append(item)
            elif isinstance(item, Mapping):
                category = clean_str(item.get("tipo", item.get("category"))) or ""
                amount = item.get("valor", item.get("amount"))
                entries.append(ExpenseEntry(category=category, amount=amount))
            else:
                entries.append(ExpenseEntry(category="", amount=item))

    if not entries:
        legacy = to_decimal(legacy_total)
        if legacy is not None and legacy > 0:
            entries.append(ExpenseEntry(category=LEGACY_EXPENSE_CATEGORY, amount=legacy))

    return tuple(entries)


def facts_from_record(record: Mapping[str, Any]) -> OccurrenceFacts:
    """Build the calculator input from one occurrence record."""
    return OccurrenceFacts(
        type_label=clean_str(record.get("tipo")) or "",
        state_label=clean_str(record.get("estado")) or "",
        city_label=clean_str(record.get("cidade")) or "",
        outcome_label=clean_str(record.get("resultado")) or "",
        sub_outcome_label=clean_str(record.get("sub_resultado")),
        arrived_at=to_datetime(record.get("chegada")),
        completed_at=to_datetime(record.get("termino")),
        odometer_start=to_decimal(record.get("km_inicial")),
        odometer_end=to_decimal(record.get("km_final")),
        expenses=parse_expenses(
            record.get("despesas_detalhadas"), record.get("despesas")
        ),
        raw_fallback=RawFallback(
            base_fee=to_decimal(record.get("valor_acionamento")),
            hourly_rate=to_decimal(record.get("valor_hora_adc")),
            km_rate=to_decimal(record.get("valor_km_adc")),
        ),
    )
