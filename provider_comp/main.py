"""
FastAPI application factory.

The compensation engine itself is a set of pure functions under services/;
this module only wires the HTTP surface, CORS and logging around it.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from provider_comp.routers import compensation, health
from provider_comp.services.compensation.rate_table import RATE_RULES
from provider_comp.settings import settings

# ── Logging ───────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Starting provider compensation API [env=%s, %d rate rules]",
        settings.environment,
        len(RATE_RULES),
    )
    yield
    logger.info("Shutting down provider compensation API")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Provider Compensation Engine",
        description=(
            "Computes what a field provider is owed for a vehicle-recovery "
            "occurrence: rate-table base fee, hour and km overage beyond the "
            "franchise, and itemized expenses. Also rolls occurrences up into "
            "the per-provider control report."
        ),
        version=settings.api_version,
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
    )

    # Dev: any origin.  Elsewhere: explicit ALLOWED_ORIGINS.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_development else settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(compensation.router)

    return app


app = create_app()
