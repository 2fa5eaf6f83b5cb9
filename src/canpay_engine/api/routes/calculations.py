"""Payroll calculation endpoints."""

from fastapi import APIRouter, status

from canpay_engine.api.dependencies import Engine
from canpay_engine.api.schemas import (
    CalculationResponse,
    ErrorResponse,
    HourlyCalculationRequest,
    SalaryCalculationRequest,
    TimesheetCalculationRequest,
)
from canpay_engine.calculators.line_builder import LineItemBuilder
from canpay_engine.calculators.types import CalculationResult

router = APIRouter(prefix="/calculations", tags=["calculations"])

_responses = {422: {"model": ErrorResponse}}


def _respond(result: CalculationResult) -> CalculationResponse:
    return CalculationResponse.from_result(result, LineItemBuilder.build_statement(result))


@router.post(
    "/hourly",
    response_model=CalculationResponse,
    status_code=status.HTTP_200_OK,
    responses=_responses,
)
async def calculate_hourly(
    engine: Engine,
    payload: HourlyCalculationRequest,
) -> CalculationResponse:
    """Estimate bi-weekly pay from an hourly wage and weekly schedule."""
    return _respond(engine.calculate_hourly(payload.to_inputs()))


@router.post(
    "/salary",
    response_model=CalculationResponse,
    status_code=status.HTTP_200_OK,
    responses=_responses,
)
async def calculate_salary(
    engine: Engine,
    payload: SalaryCalculationRequest,
) -> CalculationResponse:
    """Estimate per-period pay from an annual salary."""
    return _respond(engine.calculate_salary(payload.to_inputs()))


@router.post(
    "/timesheet",
    response_model=CalculationResponse,
    status_code=status.HTTP_200_OK,
    responses=_responses,
)
async def calculate_timesheet(
    engine: Engine,
    payload: TimesheetCalculationRequest,
) -> CalculationResponse:
    """Estimate pay from a log of check-in/check-out entries."""
    return _respond(engine.calculate_timesheet(payload.to_inputs()))
