"""
Compensation API routes.

  POST /compensation/compute      → breakdown for one occurrence
  POST /compensation/batch        → breakdown per occurrence, same order
  POST /compensation/report       → provider report for posted occurrences
  POST /compensation/report/csv   → provider report for an uploaded CSV export
  GET  /compensation/rate-table   → the rate rules, in evaluation order

Handlers are plain `def`: the engine is synchronous and CPU-only.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status

from provider_comp.schemas.common import ErrorResponse
from provider_comp.schemas.compensation import (
    CompensationOut,
    OccurrenceIn,
    RateRuleOut,
    ReportOut,
    ReportRequest,
)
from provider_comp.services.compensation.calculator import compute_compensation
from provider_comp.services.compensation.rate_table import RATE_RULES
from provider_comp.services.ingestion.csv_loader import ParseError, load_occurrence_csv
from provider_comp.services.ingestion.record_mapper import facts_from_record
from provider_comp.services.reporting.provider_report import (
    ReportPeriod,
    build_provider_report,
)
from provider_comp.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/compensation", tags=["compensation"])


def _enforce_batch_limit(count: int) -> None:
    if count > settings.batch_max_records:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=(
                f"{count} occurrences submitted; the limit per request is "
                f"{settings.batch_max_records}."
            ),
        )


@router.post("/compute", response_model=CompensationOut)
def compute(occurrence: OccurrenceIn) -> CompensationOut:
    breakdown = compute_compensation(facts_from_record(occurrence.to_record()))
    return CompensationOut.from_breakdown(breakdown)


@router.post(
    "/batch",
    response_model=list[CompensationOut],
    responses={413: {"model": ErrorResponse}},
)
def compute_batch(occurrences: list[OccurrenceIn]) -> list[CompensationOut]:
    _enforce_batch_limit(len(occurrences))
    return [
        CompensationOut.from_breakdown(
            compute_compensation(facts_from_record(occurrence.to_record()))
        )
        for occurrence in occurrences
    ]


@router.post(
    "/report", response_model=ReportOut, responses={413: {"model": ErrorResponse}}
)
def provider_report(body: ReportRequest) -> ReportOut:
    _enforce_batch_limit(len(body.occurrences))
    report = build_provider_report(
        [occurrence.to_record() for occurrence in body.occurrences],
        period=body.periodo,
        start=body.data_inicio,
        end=body.data_fim,
        search=body.busca,
    )
    return ReportOut.from_report(report)


@router.post(
    "/report/csv",
    response_model=ReportOut,
    responses={413: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def provider_report_from_csv(
    file: UploadFile = File(...),
    periodo: str = Form(ReportPeriod.ALL),
    data_inicio: Optional[date] = Form(None),
    data_fim: Optional[date] = Form(None),
    busca: Optional[str] = Form(None),
) -> ReportOut:
    if periodo not in ReportPeriod.CHOICES:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown periodo {periodo!r}. Accepted: {list(ReportPeriod.CHOICES)}",
        )

    data = file.file.read()
    filename = file.filename or "ocorrencias.csv"
    try:
        loaded = load_occurrence_csv(data, filename)
    except ParseError as exc:
        logger.warning("Rejected occurrence CSV %s: %s", filename, exc)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc

    _enforce_batch_limit(len(loaded.records))
    report = build_provider_report(
        loaded.records,
        period=periodo,
        start=data_inicio,
        end=data_fim,
        search=busca,
    )
    return ReportOut.from_report(report, file_warnings=loaded.warnings)


@router.get("/rate-table", response_model=list[RateRuleOut])
def rate_table() -> list[RateRuleOut]:
    return [
        RateRuleOut(
            rule_id=rule.rule_id,
            type_category=rule.type_category,
            regions=sorted(rule.regions, key=lambda region: region.value),
            outcomes=(
                sorted(rule.outcomes, key=lambda outcome: outcome.value)
                if rule.outcomes is not None
                else None
            ),
            base_fee=rule.base_fee,
            free_hours=rule.free_hours,
            hourly_overage_rate=rule.hourly_overage_rate,
            free_km=rule.free_km,
            km_overage_rate=rule.km_overage_rate,
        )
        for rule in RATE_RULES
    ]
