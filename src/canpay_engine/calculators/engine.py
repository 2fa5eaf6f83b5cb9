"""Payroll calculation engine - main orchestrator."""

from __future__ import annotations

import logging
import math
from decimal import Decimal, InvalidOperation

from canpay_engine.calculators.hours_classifier import HoursClassifier
from canpay_engine.calculators.jurisdiction_resolver import JurisdictionResolver
from canpay_engine.calculators.rules import DEFAULT_RULES
from canpay_engine.calculators.tax_calculator import TaxCalculator
from canpay_engine.calculators.types import (
    MINUTES_PER_HOUR,
    CalculationInputs,
    CalculationMode,
    CalculationResult,
    EarningsBreakdown,
    HourBuckets,
    HourlyInputs,
    JurisdictionRule,
    PayFrequency,
    PayrollInputError,
    RuleSet,
    SalaryInputs,
    TimesheetInputs,
)

logger = logging.getLogger(__name__)

# Hourly mode always projects a two-week pay period.
HOURLY_MODE_FREQUENCY = PayFrequency.BI_WEEKLY
WEEKS_PER_HOURLY_PERIOD = 2

# Largest accepted monetary input. Derived figures then stay within the
# default 28-digit Decimal context at cent precision.
MAX_AMOUNT = Decimal("1000000000000")


class InvalidAmountError(PayrollInputError):
    """Raised when a monetary input is not a non-negative number."""

    def __init__(self, field_name: str, value: object):
        self.field_name = field_name
        self.value = value
        super().__init__(
            f"Invalid {field_name}: {value!r} "
            f"(expected a non-negative amount up to {MAX_AMOUNT:,})"
        )


class InvalidWageError(InvalidAmountError):
    """Raised for a bad hourly wage or premium rate."""

    code = "INVALID_WAGE"


class InvalidSalaryError(InvalidAmountError):
    """Raised for a bad annual salary."""

    code = "INVALID_SALARY"


class InvalidPayFrequencyError(PayrollInputError):
    """Raised when a pay frequency is not one of ``PayFrequency``."""

    code = "INVALID_PAY_FREQUENCY"

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Unknown pay frequency: {value!r}")


def _validate_amount(
    value: object,
    field_name: str,
    error_cls: type[InvalidAmountError] = InvalidWageError,
) -> Decimal:
    """Coerce a monetary input to Decimal.

    Rejects non-numbers, negatives and anything above ``MAX_AMOUNT``.
    """
    if isinstance(value, bool) or value is None:
        raise error_cls(field_name, value)

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise error_cls(field_name, value)
        amount = Decimal(str(value))
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise error_cls(field_name, value) from None

    if not amount.is_finite() or amount < 0 or amount > MAX_AMOUNT:
        raise error_cls(field_name, value)
    return amount


def _pay(minutes: int, rate: Decimal) -> Decimal:
    return Decimal(minutes) * rate / MINUTES_PER_HOUR


def _coerce_frequency(value: PayFrequency | str) -> PayFrequency:
    try:
        return PayFrequency(value)
    except ValueError:
        raise InvalidPayFrequencyError(value) from None


class PayrollEngine:
    """Main payroll calculation engine.

    Three entry points share one pipeline:
    1) Validate inputs and resolve the jurisdiction (nothing is computed
       until every input is valid)
    2) Classify hours and build gross pay (hourly and timesheet modes)
    3) Annualize gross pay
    4) Compute pension, insurance, federal tax and provincial tax, in order
    5) Net = gross - deductions; per-period = annual / periods per year

    The engine holds only the immutable rules table, so one instance can be
    shared freely.
    """

    def __init__(self, rules: RuleSet = DEFAULT_RULES):
        self.rules = rules
        self.resolver = JurisdictionResolver(rules)
        self.tax_calculator = TaxCalculator(rules.federal, rules.pension, rules.insurance)

    def calculate(self, inputs: CalculationInputs) -> CalculationResult:
        """Dispatch to the entry point matching the input variant."""
        if isinstance(inputs, HourlyInputs):
            return self.calculate_hourly(inputs)
        if isinstance(inputs, SalaryInputs):
            return self.calculate_salary(inputs)
        if isinstance(inputs, TimesheetInputs):
            return self.calculate_timesheet(inputs)
        raise TypeError(f"Unsupported calculation inputs: {type(inputs).__name__}")

    def calculate_hourly(self, inputs: HourlyInputs) -> CalculationResult:
        """Mode A: fixed weekly schedule projected to a bi-weekly period."""
        rule = self.resolver.resolve(inputs.province)
        wage = _validate_amount(inputs.hourly_wage, "hourly wage")
        premium_rate = Decimal("0")
        if inputs.premium.enabled:
            premium_rate = _validate_amount(inputs.premium.rate_per_hour, "premium rate")

        week = HoursClassifier(rule).classify_schedule(inputs.schedule, inputs.premium)
        hours = week.scaled(WEEKS_PER_HOURLY_PERIOD)

        earnings = self._build_earnings(hours, wage, rule, premium_rate)
        if inputs.include_vacation_pay:
            earnings = EarningsBreakdown(
                regular_pay=earnings.regular_pay,
                overtime_15_pay=earnings.overtime_15_pay,
                overtime_20_pay=earnings.overtime_20_pay,
                premium_pay=earnings.premium_pay,
                vacation_pay=earnings.total * rule.vacation_pay_rate,
            )

        gross_per_period = earnings.total
        annual_gross = gross_per_period * HOURLY_MODE_FREQUENCY.periods_per_year

        return self._finish(
            CalculationMode.HOURLY,
            rule,
            HOURLY_MODE_FREQUENCY,
            annual_gross,
            gross_per_period,
            hours=hours,
            earnings=earnings,
        )

    def calculate_salary(self, inputs: SalaryInputs) -> CalculationResult:
        """Mode B: annual salary, no hours classification."""
        rule = self.resolver.resolve(inputs.province)
        salary = _validate_amount(inputs.annual_salary, "annual salary", InvalidSalaryError)
        frequency = _coerce_frequency(inputs.pay_frequency)

        return self._finish(
            CalculationMode.SALARY,
            rule,
            frequency,
            salary,
            salary / frequency.periods_per_year,
        )

    def calculate_timesheet(self, inputs: TimesheetInputs) -> CalculationResult:
        """Mode C: timesheet log, annualized by the selected pay frequency.

        The log is treated as one pay period: its gross becomes the
        per-period gross and is multiplied by periods per year.
        """
        rule = self.resolver.resolve(inputs.province)
        wage = _validate_amount(inputs.hourly_wage, "hourly wage")
        frequency = _coerce_frequency(inputs.pay_frequency)

        classification = HoursClassifier(rule).classify_timesheet(inputs.entries)
        earnings = self._build_earnings(classification.hours, wage, rule)

        gross_per_period = earnings.total
        annual_gross = gross_per_period * frequency.periods_per_year

        return self._finish(
            CalculationMode.TIMESHEET,
            rule,
            frequency,
            annual_gross,
            gross_per_period,
            hours=classification.hours,
            earnings=earnings,
            weeks=classification.weeks,
        )

    @staticmethod
    def _build_earnings(
        hours: HourBuckets,
        wage: Decimal,
        rule: JurisdictionRule,
        premium_rate: Decimal = Decimal("0"),
    ) -> EarningsBreakdown:
        """Price each hour bucket; premium is paid on top of any bucket."""
        return EarningsBreakdown(
            regular_pay=_pay(hours.regular_minutes, wage),
            overtime_15_pay=_pay(hours.overtime_15_minutes, wage * rule.overtime_multiplier),
            overtime_20_pay=_pay(hours.overtime_20_minutes, wage * rule.double_time_multiplier),
            premium_pay=_pay(hours.premium_minutes, premium_rate),
        )

    def _finish(
        self,
        mode: CalculationMode,
        rule: JurisdictionRule,
        frequency: PayFrequency,
        annual_gross: Decimal,
        gross_per_period: Decimal,
        **details,
    ) -> CalculationResult:
        annual = self.tax_calculator.calculate_annual_deductions(annual_gross, rule)

        logger.debug(
            "Calculated %s pay for %s: annual gross %s, annual net %s",
            mode.value,
            rule.code.value,
            annual.gross,
            annual.net,
        )

        return CalculationResult(
            mode=mode,
            jurisdiction=rule.code,
            pay_frequency=frequency,
            annual=annual,
            gross_pay_per_period=gross_per_period,
            **details,
        )
