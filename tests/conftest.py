"""Pytest fixtures for payroll estimator tests."""

from __future__ import annotations

from decimal import Decimal

import pytest

from canpay_engine.calculators.engine import PayrollEngine
from canpay_engine.calculators.hours_classifier import HoursClassifier
from canpay_engine.calculators.rules import DEFAULT_RULES
from canpay_engine.calculators.types import (
    HourlyInputs,
    JurisdictionRule,
    Province,
    ScheduleInput,
)

WEEKDAYS = (False, True, True, True, True, True, False)


@pytest.fixture
def engine() -> PayrollEngine:
    """Engine over the default rules table."""
    return PayrollEngine()


@pytest.fixture
def ontario() -> JurisdictionRule:
    """Ontario: no daily overtime, 44h weekly threshold."""
    return DEFAULT_RULES.jurisdictions[Province.ON]


@pytest.fixture
def british_columbia() -> JurisdictionRule:
    """British Columbia: 8h daily, 12h double time, 40h weekly."""
    return DEFAULT_RULES.jurisdictions[Province.BC]


@pytest.fixture
def alberta() -> JurisdictionRule:
    """Alberta: 8h daily, 44h weekly, no double time."""
    return DEFAULT_RULES.jurisdictions[Province.AB]


@pytest.fixture
def bc_classifier(british_columbia: JurisdictionRule) -> HoursClassifier:
    return HoursClassifier(british_columbia)


@pytest.fixture
def on_classifier(ontario: JurisdictionRule) -> HoursClassifier:
    return HoursClassifier(ontario)


@pytest.fixture
def office_week() -> ScheduleInput:
    """Mon-Fri 09:00-17:00 with a 30 minute unpaid break."""
    return ScheduleInput(
        start_time="09:00",
        end_time="17:00",
        unpaid_break_minutes=30,
        days_active=WEEKDAYS,
    )


@pytest.fixture
def ontario_office_inputs(office_week: ScheduleInput) -> HourlyInputs:
    """$20/hr office worker in Ontario."""
    return HourlyInputs(
        province="ON",
        hourly_wage=Decimal("20"),
        schedule=office_week,
    )
