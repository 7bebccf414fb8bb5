"""
CSV loader: occurrence exports (dashboard CSV download, spreadsheets saved
as CSV) into raw occurrence records.

Column mapping strategy:
  Exports come from different screens and spreadsheet templates, so headers
  vary ("UF" vs "Estado", "Hora Chegada" vs "chegada", accents or not).
  Headers are normalized and looked up in COLUMN_ALIASES; unknown columns
  are ignored.  Rows are returned as dicts keyed by the canonical record
  field names that record_mapper.facts_from_record() expects.
"""

import io
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import pandas as pd

from provider_comp.services.classification.text import normalize

logger = logging.getLogger(__name__)


class ParseError(Exception):
    """Raised when a file cannot be parsed (bad format, encoding error, etc.)."""


# canonical field: accepted header variants (already normalized)
COLUMN_ALIASES: dict[str, list[str]] = {
    "id": ["id", "ocorrencia", "ocorrencia id", "numero"],
    "tipo": ["tipo", "tipo ocorrencia", "tipo da ocorrencia"],
    "estado": ["estado", "uf"],
    "cidade": ["cidade", "municipio"],
    "resultado": ["resultado", "status recuperacao"],
    "sub_resultado": ["sub resultado", "subresultado"],
    "status": ["status", "situacao"],
    "prestador": ["prestador", "nome prestador", "apoio"],
    "placa1": ["placa1", "placa", "placa 1"],
    "data_acionamento": ["data acionamento", "data do acionamento", "acionamento"],
    "inicio": ["inicio", "hora inicio", "hora inicial"],
    "chegada": ["chegada", "hora chegada", "hora inicial local"],
    "termino": ["termino", "hora termino", "hora final"],
    "km_inicial": ["km inicial", "km inicio", "odometro inicial"],
    "km_final": ["km final", "km fim", "odometro final"],
    "despesas_detalhadas": ["despesas detalhadas"],
    "despesas": ["despesas", "total despesas"],
    "valor_acionamento": ["valor acionamento"],
    "valor_hora_adc": ["valor hora adc", "valor hora adicional"],
    "valor_km_adc": ["valor km adc", "valor km adicional"],
}


@dataclass
class OccurrenceLoadResult:
    records: list[dict[str, Any]]
    warnings: list[str] = field(default_factory=list)
    unmapped_columns: list[str] = field(default_factory=list)


def _decode(data: bytes, filename: str, warnings: list[str]) -> str:
    try:
        return data.decode("utf-8-sig")  # utf-8-sig strips BOM if present
    except UnicodeDecodeError:
        pass
    try:
        text = data.decode("cp1252")
    except UnicodeDecodeError:
        # latin-1 maps every byte; only reached for bytes cp1252 leaves undefined
        text = data.decode("latin-1")
    warnings.append(f"File {filename!r} decoded as Windows/latin-1, not UTF-8")
    return text


def _sniff_delimiter(text: str) -> str:
    header = text.splitlines()[0] if text else ""
    # Brazilian Excel writes ';'-separated CSV
    for delimiter in ("\t", ";"):
        if header.count(delimiter) > header.count(","):
            return delimiter
    return ","


def _build_column_map(columns: list[str]) -> tuple[dict[str, str], list[str]]:
    """actual header -> canonical field, plus the headers nothing claimed."""
    lookup = {
        alias: canonical
        for canonical, aliases in COLUMN_ALIASES.items()
        for alias in [normalize(canonical), *aliases]
    }
    mapping: dict[str, str] = {}
    unmapped: list[str] = []
    for column in columns:
        canonical = lookup.get(normalize(column))
        if canonical is None or canonical in mapping.values():
            unmapped.append(column)
            continue
        mapping[column] = canonical
    return mapping, unmapped


def load_occurrence_csv(data: bytes, filename: str = "ocorrencias.csv") -> OccurrenceLoadResult:
    """
    Parse CSV bytes into raw occurrence records.

    Raises:
        ParseError: undecodable/unparsable file, no data rows, or no
            recognizable occurrence columns.
    """
    warnings: list[str] = []
    text = _decode(data, filename, warnings)
    delimiter = _sniff_delimiter(text)

    try:
        df = pd.read_csv(
            io.StringIO(text),
            delimiter=delimiter,
            dtype=str,  # everything as text; record_mapper does the coercion
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except Exception as exc:
        raise ParseError(f"pandas failed to parse {filename!r}: {exc}") from exc

    if df.empty:
        raise ParseError(f"File {filename!r} contains no data rows")

    column_map, unmapped = _build_column_map([str(c) for c in df.columns])
    if "tipo" not in column_map.values():
        raise ParseError(
            f"File {filename!r} has no occurrence type column. "
            f"Found columns: {list(df.columns)}. "
            f"Accepted headers: {COLUMN_ALIASES['tipo']}"
        )
    if unmapped:
        logger.debug("Ignoring unrecognized columns in %s: %s", filename, unmapped)

    df = df[list(column_map)].rename(columns=column_map)

    records: list[dict[str, Any]] = []
    for row in df.to_dict(orient="records"):
        record: dict[str, Any] = {key: _cell(value) for key, value in row.items()}
        records.append(record)

    logger.info("Loaded %d occurrence records from %s", len(records), filename)
    return OccurrenceLoadResult(records=records, warnings=warnings, unmapped_columns=unmapped)


def _cell(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
