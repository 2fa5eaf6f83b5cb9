"""Health check endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, status
from pydantic import BaseModel

from canpay_engine.api.dependencies import Engine
from canpay_engine.config import get_settings

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    engine_version: str
    tax_year: str
    jurisdictions: int


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
)
async def health_check(engine: Engine) -> HealthResponse:
    """Check API health and the loaded rules table."""
    jurisdiction_count = len(engine.rules.jurisdictions)
    return HealthResponse(
        status="healthy" if jurisdiction_count else "degraded",
        timestamp=datetime.now(timezone.utc),
        engine_version=get_settings().engine_version,
        tax_year=engine.rules.tax_year,
        jurisdictions=jurisdiction_count,
    )


@router.get("/ready", status_code=status.HTTP_200_OK)
async def readiness_check() -> dict[str, str]:
    """Readiness check for container orchestration."""
    return {"status": "ready"}


@router.get("/live", status_code=status.HTTP_200_OK)
async def liveness_check() -> dict[str, str]:
    """Liveness check for container orchestration."""
    return {"status": "alive"}
