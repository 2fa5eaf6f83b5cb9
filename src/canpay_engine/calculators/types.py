"""Type definitions for calculation pipeline."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Union

MINUTES_PER_HOUR = Decimal("60")


class PayrollInputError(ValueError):
    """Base class for input validation failures.

    Raised before any bucket or tax arithmetic runs; a calculation is never
    partially computed.
    """

    code = "INVALID_INPUT"


class Province(str, Enum):
    """Canadian provinces and territories."""

    AB = "AB"
    BC = "BC"
    MB = "MB"
    NB = "NB"
    NL = "NL"
    NS = "NS"
    ON = "ON"
    PE = "PE"
    QC = "QC"
    SK = "SK"
    NT = "NT"
    NU = "NU"
    YT = "YT"


class PayFrequency(str, Enum):
    """Pay frequencies."""

    DAILY = "daily"
    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    SEMI_MONTHLY = "semi-monthly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"

    @property
    def periods_per_year(self) -> int:
        return PERIODS_PER_YEAR[self]


PERIODS_PER_YEAR: Mapping[PayFrequency, int] = {
    PayFrequency.DAILY: 365,
    PayFrequency.WEEKLY: 52,
    PayFrequency.BI_WEEKLY: 26,
    PayFrequency.SEMI_MONTHLY: 24,
    PayFrequency.MONTHLY: 12,
    PayFrequency.QUARTERLY: 4,
}


class CalculationMode(str, Enum):
    """Calculation entry points."""

    HOURLY = "hourly"
    SALARY = "salary"
    TIMESHEET = "timesheet"


# ============================================================================
# Static rules
# ============================================================================


@dataclass(frozen=True)
class TaxBracket:
    """Tax bracket for progressive taxation."""

    threshold: Decimal | None  # Upper bound; None = no upper limit
    rate: Decimal  # As decimal, e.g., 0.205 for 20.5%


def _validate_brackets(owner: str, brackets: Sequence[TaxBracket]) -> None:
    if not brackets:
        raise ValueError(f"{owner}: at least one bracket is required")

    previous = Decimal("0")
    for i, bracket in enumerate(brackets):
        if bracket.rate < 0:
            raise ValueError(f"{owner}: bracket {i} has a negative rate")
        is_last = i == len(brackets) - 1
        if bracket.threshold is None:
            if not is_last:
                raise ValueError(f"{owner}: only the last bracket may be unbounded")
            continue
        if is_last:
            raise ValueError(f"{owner}: last bracket must be unbounded")
        if bracket.threshold <= previous:
            raise ValueError(f"{owner}: bracket thresholds must be strictly increasing")
        previous = bracket.threshold


def _validate_whole_minutes(owner: str, label: str, hours: Decimal | None) -> None:
    if hours is None:
        return
    minutes = hours * 60
    if hours < 0 or minutes != minutes.to_integral_value():
        raise ValueError(f"{owner}: {label} must be a non-negative whole number of minutes")


@dataclass(frozen=True)
class JurisdictionRule:
    """Employment standards and income tax rules for one province/territory."""

    code: Province
    name: str
    daily_overtime_threshold: Decimal | None  # Hours per day, None if not applicable
    weekly_overtime_threshold: Decimal  # Hours per week
    vacation_pay_rate: Decimal
    basic_personal_amount: Decimal
    brackets: tuple[TaxBracket, ...]
    overtime_multiplier: Decimal = Decimal("1.5")
    double_time_threshold: Decimal | None = None  # Hours per day after which 2x applies
    double_time_multiplier: Decimal = Decimal("2.0")

    def __post_init__(self) -> None:
        _validate_brackets(self.name, self.brackets)
        _validate_whole_minutes(self.name, "daily overtime threshold", self.daily_overtime_threshold)
        _validate_whole_minutes(self.name, "weekly overtime threshold", self.weekly_overtime_threshold)
        _validate_whole_minutes(self.name, "double time threshold", self.double_time_threshold)
        if (
            self.double_time_threshold is not None
            and self.daily_overtime_threshold is not None
            and self.double_time_threshold < self.daily_overtime_threshold
        ):
            raise ValueError(
                f"{self.name}: double time threshold is below the daily overtime threshold"
            )


@dataclass(frozen=True)
class FederalRule:
    """Federal income tax schedule, applied regardless of province."""

    basic_personal_amount: Decimal
    brackets: tuple[TaxBracket, ...]

    def __post_init__(self) -> None:
        _validate_brackets("Federal", self.brackets)


@dataclass(frozen=True)
class StatutoryContributionRule:
    """Flat-rate payroll contribution with an annual cap (CPP, EI)."""

    name: str
    rate: Decimal
    max_annual: Decimal
    exemption: Decimal = Decimal("0")  # Subtracted before applying the rate


@dataclass(frozen=True)
class RuleSet:
    """Complete static rules table for one tax year."""

    tax_year: str
    federal: FederalRule
    pension: StatutoryContributionRule
    insurance: StatutoryContributionRule
    jurisdictions: Mapping[Province, JurisdictionRule]


# ============================================================================
# Inputs
# ============================================================================


@dataclass(frozen=True)
class ScheduleInput:
    """Fixed weekly schedule. ``days_active`` is ordered Sun..Sat."""

    start_time: str
    end_time: str
    unpaid_break_minutes: int = 0
    days_active: tuple[bool, ...] = (False, True, True, True, True, True, False)

    @property
    def active_day_count(self) -> int:
        return sum(1 for active in self.days_active if active)


@dataclass(frozen=True)
class PremiumWindow:
    """Shift premium paid per hour worked inside a time-of-day window."""

    enabled: bool = False
    rate_per_hour: Decimal = Decimal("0")
    start_time: str = "00:00"
    end_time: str = "06:00"


@dataclass(frozen=True)
class TimesheetEntry:
    """One check-in/check-out record."""

    work_date: date | str
    check_in: str
    check_out: str
    unpaid_break_minutes: int = 0
    notes: str | None = None
    entry_id: str | None = None


@dataclass(frozen=True)
class HourlyInputs:
    """Mode A: hourly wage on a fixed weekly schedule."""

    province: Province | str
    hourly_wage: Decimal
    schedule: ScheduleInput
    premium: PremiumWindow = field(default_factory=PremiumWindow)
    include_vacation_pay: bool = False

    mode = CalculationMode.HOURLY


@dataclass(frozen=True)
class SalaryInputs:
    """Mode B: annual salary."""

    province: Province | str
    annual_salary: Decimal
    pay_frequency: PayFrequency = PayFrequency.BI_WEEKLY

    mode = CalculationMode.SALARY


@dataclass(frozen=True)
class TimesheetInputs:
    """Mode C: hourly wage over a log of timesheet entries."""

    province: Province | str
    hourly_wage: Decimal
    entries: tuple[TimesheetEntry, ...]
    pay_frequency: PayFrequency = PayFrequency.BI_WEEKLY

    mode = CalculationMode.TIMESHEET


CalculationInputs = Union[HourlyInputs, SalaryInputs, TimesheetInputs]


# ============================================================================
# Results
# ============================================================================


@dataclass(frozen=True)
class HourBuckets:
    """Classified time, held in whole minutes so buckets always add up."""

    regular_minutes: int = 0
    overtime_15_minutes: int = 0
    overtime_20_minutes: int = 0
    premium_minutes: int = 0  # Overlaps the other buckets, not part of total

    @property
    def total_minutes(self) -> int:
        return self.regular_minutes + self.overtime_15_minutes + self.overtime_20_minutes

    @property
    def regular_hours(self) -> Decimal:
        return Decimal(self.regular_minutes) / MINUTES_PER_HOUR

    @property
    def overtime_15_hours(self) -> Decimal:
        return Decimal(self.overtime_15_minutes) / MINUTES_PER_HOUR

    @property
    def overtime_20_hours(self) -> Decimal:
        return Decimal(self.overtime_20_minutes) / MINUTES_PER_HOUR

    @property
    def premium_hours(self) -> Decimal:
        return Decimal(self.premium_minutes) / MINUTES_PER_HOUR

    @property
    def total_hours(self) -> Decimal:
        return Decimal(self.total_minutes) / MINUTES_PER_HOUR

    def __add__(self, other: HourBuckets) -> HourBuckets:
        return HourBuckets(
            regular_minutes=self.regular_minutes + other.regular_minutes,
            overtime_15_minutes=self.overtime_15_minutes + other.overtime_15_minutes,
            overtime_20_minutes=self.overtime_20_minutes + other.overtime_20_minutes,
            premium_minutes=self.premium_minutes + other.premium_minutes,
        )

    def scaled(self, factor: int) -> HourBuckets:
        return HourBuckets(
            regular_minutes=self.regular_minutes * factor,
            overtime_15_minutes=self.overtime_15_minutes * factor,
            overtime_20_minutes=self.overtime_20_minutes * factor,
            premium_minutes=self.premium_minutes * factor,
        )


@dataclass(frozen=True)
class WeekBreakdown:
    """Classified hours for one ISO week of a timesheet."""

    iso_year: int
    iso_week: int
    days_worked: int
    hours: HourBuckets


@dataclass(frozen=True)
class EarningsBreakdown:
    """Gross pay for one period, split by source."""

    regular_pay: Decimal = Decimal("0")
    overtime_15_pay: Decimal = Decimal("0")
    overtime_20_pay: Decimal = Decimal("0")
    premium_pay: Decimal = Decimal("0")
    vacation_pay: Decimal = Decimal("0")

    @property
    def total(self) -> Decimal:
        return (
            self.regular_pay
            + self.overtime_15_pay
            + self.overtime_20_pay
            + self.premium_pay
            + self.vacation_pay
        )


@dataclass(frozen=True)
class AnnualDeductions:
    """Output of the shared annual deduction pipeline."""

    gross: Decimal
    pension: Decimal
    insurance: Decimal
    federal_taxable: Decimal
    provincial_taxable: Decimal
    federal_tax: Decimal
    provincial_tax: Decimal

    @property
    def total(self) -> Decimal:
        return self.federal_tax + self.provincial_tax + self.pension + self.insurance

    @property
    def net(self) -> Decimal:
        return self.gross - self.total


@dataclass(frozen=True)
class CalculationResult:
    """Result of one calculation, common to all three modes.

    ``hours`` and ``earnings`` are None in salary mode, where no time is
    classified. ``weeks`` is only set in timesheet mode. All per-period
    figures are the annual figure divided by ``periods_per_year``; nothing
    is rounded here.
    """

    mode: CalculationMode
    jurisdiction: Province
    pay_frequency: PayFrequency
    annual: AnnualDeductions
    gross_pay_per_period: Decimal
    hours: HourBuckets | None = None
    earnings: EarningsBreakdown | None = None
    weeks: tuple[WeekBreakdown, ...] | None = None

    @property
    def periods_per_year(self) -> int:
        return self.pay_frequency.periods_per_year

    def _per_period(self, amount: Decimal) -> Decimal:
        return amount / self.periods_per_year

    @property
    def federal_tax(self) -> Decimal:
        return self._per_period(self.annual.federal_tax)

    @property
    def provincial_tax(self) -> Decimal:
        return self._per_period(self.annual.provincial_tax)

    @property
    def pension_deduction(self) -> Decimal:
        return self._per_period(self.annual.pension)

    @property
    def insurance_deduction(self) -> Decimal:
        return self._per_period(self.annual.insurance)

    @property
    def total_deductions_per_period(self) -> Decimal:
        return self._per_period(self.annual.total)

    @property
    def net_pay_per_period(self) -> Decimal:
        return self._per_period(self.annual.net)

    @property
    def gross_pay_annual(self) -> Decimal:
        return self.annual.gross

    @property
    def net_pay_annual(self) -> Decimal:
        return self.annual.net

    @property
    def total_deductions_annual(self) -> Decimal:
        return self.annual.total

    @property
    def take_home_ratio(self) -> Decimal:
        """Share of gross kept after deductions (0 when gross is 0)."""
        if self.annual.gross == 0:
            return Decimal("0")
        return self.annual.net / self.annual.gross
