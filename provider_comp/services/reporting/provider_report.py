"""
Provider control report ("Controle Prestador").

Takes a collection of raw occurrence records, keeps the ones the financial
screen would show, computes one compensation breakdown per occurrence and
rolls them up per provider.

Filters, applied in order:
  1. finalized only: records whose status is em_andamento are dropped
  2. period, on data_acionamento (falling back to inicio); records with no
     usable date are kept
  3. free-text search over placa1 / prestador / tipo (case-insensitive)

Each occurrence is computed independently; nothing here touches shared state.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional
from zoneinfo import ZoneInfo

import pandas as pd

from provider_comp.services.compensation.base import ZERO, CompensationBreakdown
from provider_comp.services.compensation.calculator import compute_compensation
from provider_comp.services.ingestion.record_mapper import (
    clean_str,
    facts_from_record,
    to_datetime,
)
from provider_comp.settings import settings

logger = logging.getLogger(__name__)

MONEY_COLUMNS = ["valor_acionamento", "valor_hora_adc", "valor_km_adc", "despesas", "total"]
NO_PROVIDER_LABEL = "(sem prestador)"
IN_PROGRESS_STATUS = "em_andamento"


class ReportPeriod:
    ALL = "tudo"
    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    CURRENT_MONTH = "mes_atual"
    CUSTOM = "personalizado"

    CHOICES = (ALL, LAST_7_DAYS, LAST_30_DAYS, CURRENT_MONTH, CUSTOM)


@dataclass
class OccurrenceLine:
    occurrence_id: Optional[str]
    prestador: Optional[str]
    placa: Optional[str]
    tipo: Optional[str]
    breakdown: CompensationBreakdown


@dataclass
class ProviderSummary:
    prestador: str
    ocorrencias: int
    valor_acionamento: Decimal
    valor_hora_adc: Decimal
    valor_km_adc: Decimal
    despesas: Decimal
    total: Decimal


@dataclass
class ProviderReport:
    lines: list[OccurrenceLine] = field(default_factory=list)
    providers: list[ProviderSummary] = field(default_factory=list)
    totals: dict[str, Decimal] = field(default_factory=dict)
    excluded_in_progress: int = 0
    excluded_by_filters: int = 0


# ── Filtering ─────────────────────────────────────────────────────────────────


def _local_now() -> datetime:
    return datetime.now(ZoneInfo(settings.report_timezone)).replace(tzinfo=None)


def _as_local_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(ZoneInfo(settings.report_timezone)).replace(tzinfo=None)


def period_bounds(
    period: str,
    start: Optional[date] = None,
    end: Optional[date] = None,
    now: Optional[datetime] = None,
) -> Optional[tuple[datetime, datetime]]:
    """
    Inclusive [from, to] window for a period choice, in local naive time.

    None means "no date filter": period "tudo", an unknown choice, or a
    custom period missing either date.
    """
    now = now or _local_now()
    if period == ReportPeriod.LAST_7_DAYS:
        return now - timedelta(days=7), now
    if period == ReportPeriod.LAST_30_DAYS:
        return now - timedelta(days=30), now
    if period == ReportPeriod.CURRENT_MONTH:
        return datetime(now.year, now.month, 1), now
    if period == ReportPeriod.CUSTOM and start and end:
        return datetime.combine(start, time.min), datetime.combine(end, time.max)
    return None


def _activation_time(record: Mapping[str, Any]) -> Optional[datetime]:
    moment = to_datetime(record.get("data_acionamento")) or to_datetime(record.get("inicio"))
    return _as_local_naive(moment) if moment is not None else None


def is_in_progress(record: Mapping[str, Any]) -> bool:
    return (clean_str(record.get("status")) or "").lower() == IN_PROGRESS_STATUS


def matches_search(record: Mapping[str, Any], search: Optional[str]) -> bool:
    query = (search or "").strip().lower()
    if not query:
        return True
    fields = (record.get("placa1"), record.get("prestador"), record.get("tipo"))
    return any(query in str(value).lower() for value in fields if value is not None)


def filter_occurrences(
    records: Iterable[Mapping[str, Any]],
    period: str = ReportPeriod.ALL,
    start: Optional[date] = None,
    end: Optional[date] = None,
    search: Optional[str] = None,
    now: Optional[datetime] = None,
) -> tuple[list[Mapping[str, Any]], int, int]:
    """
    Apply the report filters.

    Returns (kept records, number dropped as in progress, number dropped by
    period/search).
    """
    bounds = period_bounds(period, start, end, now)
    kept: list[Mapping[str, Any]] = []
    in_progress = 0
    filtered_out = 0

    for record in records:
        if is_in_progress(record):
            in_progress += 1
            continue
        if bounds is not None:
            moment = _activation_time(record)
            if moment is not None and not (bounds[0] <= moment <= bounds[1]):
                filtered_out += 1
                continue
        if not matches_search(record, search):
            filtered_out += 1
            continue
        kept.append(record)

    return kept, in_progress, filtered_out


# ── Aggregation ───────────────────────────────────────────────────────────────


def summarize_by_provider(lines: list[OccurrenceLine]) -> list[ProviderSummary]:
    """Occurrence count and money column sums per provider, sorted by name."""
    if not lines:
        return []

    df = pd.DataFrame(
        [
            {"prestador": line.prestador or NO_PROVIDER_LABEL, **line.breakdown.as_export_row()}
            for line in lines
        ],
        dtype=object,  # keep the Decimals; never coerce money to float
    )
    return [
        ProviderSummary(
            prestador=str(name),
            ocorrencias=len(group),
            **{column: sum(group[column], ZERO) for column in MONEY_COLUMNS},
        )
        for name, group in df.groupby("prestador", sort=True)
    ]


def build_provider_report(
    records: Iterable[Mapping[str, Any]],
    period: str = ReportPeriod.ALL,
    start: Optional[date] = None,
    end: Optional[date] = None,
    search: Optional[str] = None,
    now: Optional[datetime] = None,
) -> ProviderReport:
    kept, in_progress, filtered_out = filter_occurrences(
        records, period=period, start=start, end=end, search=search, now=now
    )

    lines = [
        OccurrenceLine(
            occurrence_id=clean_str(record.get("id")),
            prestador=clean_str(record.get("prestador")),
            placa=clean_str(record.get("placa1")),
            tipo=clean_str(record.get("tipo")),
            breakdown=compute_compensation(facts_from_record(record)),
        )
        for record in kept
    ]
    providers = summarize_by_provider(lines)

    totals = {column: ZERO for column in MONEY_COLUMNS}
    for summary in providers:
        for column in MONEY_COLUMNS:
            totals[column] += getattr(summary, column)

    logger.info(
        "Provider report: %d occurrences, %d providers (%d in progress, %d filtered out)",
        len(lines),
        len(providers),
        in_progress,
        filtered_out,
    )

    return ProviderReport(
        lines=lines,
        providers=providers,
        totals=totals,
        excluded_in_progress=in_progress,
        excluded_by_filters=filtered_out,
    )
