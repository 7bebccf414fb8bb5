"""
Compensation request and response shapes.

Request fields keep the application's record names (tipo, estado, chegada,
km_inicial, ...) and deliberately loose types: occurrences are posted in
whatever state the forms left them, and deciding what is usable belongs to
the record mapper, not to request validation.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Literal, Optional, Union

from pydantic import ConfigDict

from provider_comp.schemas.common import BaseSchema
from provider_comp.services.compensation.base import CompensationBreakdown
from provider_comp.services.reporting.provider_report import (
    OccurrenceLine,
    ProviderReport,
    ReportPeriod,
)
from provider_comp.taxonomy.constants import MacroRegion, OutcomeBucket, TypeCategory

Scalar = Union[str, int, float, None]


# ── Request ──────────────────────────────────────────────────────────────────


class OccurrenceIn(BaseSchema):
    """One occurrence record as the data-access layer delivers it."""

    model_config = ConfigDict(extra="allow")

    id: Scalar = None
    tipo: Optional[str] = None
    estado: Optional[str] = None
    cidade: Optional[str] = None
    resultado: Optional[str] = None
    sub_resultado: Optional[str] = None
    status: Optional[str] = None
    prestador: Optional[str] = None
    placa1: Optional[str] = None
    data_acionamento: Optional[str] = None
    inicio: Optional[str] = None
    chegada: Optional[str] = None
    termino: Optional[str] = None
    km_inicial: Scalar = None
    km_final: Scalar = None
    despesas_detalhadas: Union[list[Any], str, None] = None
    despesas: Scalar = None
    valor_acionamento: Scalar = None
    valor_hora_adc: Scalar = None
    valor_km_adc: Scalar = None

    def to_record(self) -> dict[str, Any]:
        return self.model_dump()


class ReportRequest(BaseSchema):
    occurrences: list[OccurrenceIn]
    periodo: Literal["tudo", "7d", "30d", "mes_atual", "personalizado"] = ReportPeriod.ALL
    data_inicio: Optional[date] = None
    data_fim: Optional[date] = None
    busca: Optional[str] = None


# ── Response ─────────────────────────────────────────────────────────────────


class CompensationOut(BaseSchema):
    """Flat breakdown (export columns) plus how it was reached."""

    valor_acionamento: Decimal
    valor_hora_adc: Decimal
    valor_km_adc: Decimal
    despesas: Decimal
    total: Decimal

    macro_regiao: MacroRegion
    categoria: TypeCategory
    resultado: OutcomeBucket
    regra: Optional[str] = None  # None → provider's registered rates
    minutos: Optional[int] = None
    km_total: Optional[Decimal] = None
    avisos: list[str] = []

    @classmethod
    def from_breakdown(cls, breakdown: CompensationBreakdown) -> "CompensationOut":
        return cls(
            **breakdown.as_export_row(),
            macro_regiao=breakdown.region,
            categoria=breakdown.type_category,
            resultado=breakdown.outcome,
            regra=breakdown.rule_id,
            minutos=breakdown.minutes,
            km_total=breakdown.distance,
            avisos=list(breakdown.warnings),
        )


class ReportLineOut(BaseSchema):
    id: Optional[str] = None
    prestador: Optional[str] = None
    placa: Optional[str] = None
    tipo: Optional[str] = None
    compensacao: CompensationOut

    @classmethod
    def from_line(cls, line: OccurrenceLine) -> "ReportLineOut":
        return cls(
            id=line.occurrence_id,
            prestador=line.prestador,
            placa=line.placa,
            tipo=line.tipo,
            compensacao=CompensationOut.from_breakdown(line.breakdown),
        )


class ProviderSummaryOut(BaseSchema):
    prestador: str
    ocorrencias: int
    valor_acionamento: Decimal
    valor_hora_adc: Decimal
    valor_km_adc: Decimal
    despesas: Decimal
    total: Decimal


class ReportOut(BaseSchema):
    linhas: list[ReportLineOut]
    prestadores: list[ProviderSummaryOut]
    totais: dict[str, Decimal]
    excluidas_em_andamento: int
    excluidas_por_filtro: int
    avisos_arquivo: list[str] = []

    @classmethod
    def from_report(
        cls, report: ProviderReport, file_warnings: Optional[list[str]] = None
    ) -> "ReportOut":
        return cls(
            linhas=[ReportLineOut.from_line(line) for line in report.lines],
            prestadores=[ProviderSummaryOut.model_validate(p) for p in report.providers],
            totais=report.totals,
            excluidas_em_andamento=report.excluded_in_progress,
            excluidas_por_filtro=report.excluded_by_filters,
            avisos_arquivo=file_warnings or [],
        )


class RateRuleOut(BaseSchema):
    rule_id: str
    type_category: TypeCategory
    regions: list[MacroRegion]
    outcomes: Optional[list[OutcomeBucket]] = None  # None → any outcome
    base_fee: Decimal
    free_hours: Decimal
    hourly_overage_rate: Decimal
    free_km: Decimal
    km_overage_rate: Decimal
