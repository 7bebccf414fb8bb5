"""Health check endpoint for the hosting platform's liveness probe."""

from fastapi import APIRouter
from pydantic import BaseModel

from provider_comp.services.compensation.rate_table import RATE_RULES
from provider_comp.settings import settings

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    environment: str
    rate_rules: int
    version: str


@router.get("/health", response_model=HealthResponse, include_in_schema=False)
def health_check() -> HealthResponse:
    """The engine has no external dependencies: up means ready."""
    return HealthResponse(
        status="ok",
        environment=settings.environment,
        rate_rules=len(RATE_RULES),
        version=settings.api_version,
    )
