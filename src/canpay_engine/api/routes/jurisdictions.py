"""Rules table endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path

from canpay_engine.api.dependencies import Engine
from canpay_engine.api.schemas import (
    ErrorResponse,
    JurisdictionListResponse,
    JurisdictionResponse,
    PayFrequencyResponse,
)
from canpay_engine.calculators.types import PayFrequency

router = APIRouter(tags=["rules"])


@router.get("/jurisdictions", response_model=JurisdictionListResponse)
async def list_jurisdictions(engine: Engine) -> JurisdictionListResponse:
    """List every province/territory with its overtime and tax rules."""
    items = [JurisdictionResponse.from_rule(r) for r in engine.resolver.all()]
    return JurisdictionListResponse(
        tax_year=engine.rules.tax_year,
        items=items,
        total=len(items),
    )


@router.get(
    "/jurisdictions/{identifier}",
    response_model=JurisdictionResponse,
    responses={422: {"model": ErrorResponse}},
)
async def get_jurisdiction(
    engine: Engine,
    identifier: Annotated[str, Path(description="Province code or name")],
) -> JurisdictionResponse:
    """Get one jurisdiction by code ("ON") or name ("Ontario")."""
    return JurisdictionResponse.from_rule(engine.resolver.resolve(identifier))


@router.get("/pay-frequencies", response_model=list[PayFrequencyResponse])
async def list_pay_frequencies() -> list[PayFrequencyResponse]:
    """List supported pay frequencies and their periods per year."""
    return [
        PayFrequencyResponse(frequency=f, periods_per_year=f.periods_per_year)
        for f in PayFrequency
    ]
