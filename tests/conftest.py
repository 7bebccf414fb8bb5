"""
Test fixtures and shared setup.

The engine is pure, so nothing here touches a database or network: the
fixtures are raw occurrence records shaped like the data-access layer's
output, plus a TestClient around the FastAPI app.
"""

import os
import pytest
from datetime import datetime
from decimal import Decimal

from fastapi.testclient import TestClient

# ── Override settings BEFORE importing app modules ────────────────────────────
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("BATCH_MAX_RECORDS", "50")

from provider_comp.main import app
from provider_comp.services.compensation.base import (
    ExpenseEntry,
    OccurrenceFacts,
    RawFallback,
)


@pytest.fixture
def client() -> TestClient:
    with TestClient(app) as c:
        yield c


# ── Data builder fixtures ──────────────────────────────────────────────────────


@pytest.fixture
def capital_theft_facts() -> OccurrenceFacts:
    """
    Roubo in São Paulo city, recovered: 4h30 on site, 80 km driven,
    R$ 50 of expenses.  150 base + 45 hour overage + 30 km overage + 50.
    """
    return OccurrenceFacts(
        type_label="Roubo",
        state_label="SP",
        city_label="São Paulo",
        outcome_label="Recuperado",
        arrived_at=datetime(2024, 5, 1, 10, 0),
        completed_at=datetime(2024, 5, 1, 14, 30),
        odometer_start=Decimal("1000"),
        odometer_end=Decimal("1080"),
        expenses=(ExpenseEntry("Pedágio", Decimal("20")), ExpenseEntry("Alimentação", Decimal("30"))),
        raw_fallback=RawFallback(base_fee=Decimal("999")),
    )


@pytest.fixture
def capital_theft_record() -> dict:
    """The same occurrence as `capital_theft_facts`, as a raw record."""
    return {
        "id": "OC-1001",
        "tipo": "Roubo",
        "estado": "SP",
        "cidade": "São Paulo",
        "resultado": "RECUPERADO",
        "sub_resultado": "COM_RASTREIO",
        "status": "concluido",
        "prestador": "Carlos Lima",
        "placa1": "ABC1D23",
        "data_acionamento": "2024-05-01T09:40:00",
        "inicio": "2024-05-01T09:40:00",
        "chegada": "2024-05-01T10:00:00",
        "termino": "2024-05-01T14:30:00",
        "km_inicial": 1000,
        "km_final": 1080,
        "despesas_detalhadas": [
            {"tipo": "Pedágio", "valor": 20},
            {"tipo": "Alimentação", "valor": "30,00"},
        ],
        "valor_acionamento": "999",
    }


@pytest.fixture
def interior_appropriation_record() -> dict:
    """Apropriação in Campinas, not recovered: within franchise, no expenses."""
    return {
        "id": "OC-1002",
        "tipo": "Apropriação Indébita",
        "estado": "São Paulo",
        "cidade": "Campinas",
        "resultado": "NAO_RECUPERADO",
        "status": "concluido",
        "prestador": "Ana Souza",
        "placa1": "XYZ9K88",
        "data_acionamento": "2024-05-03T08:00:00",
        "chegada": "2024-05-03T08:30:00",
        "termino": "2024-05-03T10:30:00",
        "km_inicial": "500",
        "km_final": "540",
    }
