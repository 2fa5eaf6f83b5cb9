"""Pydantic schemas for API request/response models."""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from canpay_engine.calculators.line_builder import LineItemBuilder, PayStatement
from canpay_engine.calculators.types import (
    CalculationMode,
    CalculationResult,
    EarningsBreakdown,
    HourBuckets,
    HourlyInputs,
    JurisdictionRule,
    PayFrequency,
    PremiumWindow,
    SalaryInputs,
    ScheduleInput,
    TimesheetEntry,
    TimesheetInputs,
    WeekBreakdown,
)

cents = LineItemBuilder.round_to_cents


def _hours(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.01"))


# ============================================================================
# Request schemas
# ============================================================================


class ScheduleRequest(BaseModel):
    """Fixed weekly schedule."""

    start_time: str = "09:00"
    end_time: str = "17:00"
    unpaid_break_minutes: int = 30
    days_active: list[bool] = Field(
        default_factory=lambda: [False, True, True, True, True, True, False],
        description="Seven flags ordered Sunday..Saturday",
    )


class PremiumRequest(BaseModel):
    """Shift premium window."""

    enabled: bool = False
    rate_per_hour: Any = Decimal("0")
    start_time: str = "00:00"
    end_time: str = "06:00"


class HourlyCalculationRequest(BaseModel):
    """Schema for an hourly-schedule calculation."""

    province: str
    hourly_wage: Any
    schedule: ScheduleRequest = Field(default_factory=ScheduleRequest)
    premium: PremiumRequest = Field(default_factory=PremiumRequest)
    include_vacation_pay: bool = False

    def to_inputs(self) -> HourlyInputs:
        return HourlyInputs(
            province=self.province,
            hourly_wage=self.hourly_wage,
            schedule=ScheduleInput(
                start_time=self.schedule.start_time,
                end_time=self.schedule.end_time,
                unpaid_break_minutes=self.schedule.unpaid_break_minutes,
                days_active=tuple(self.schedule.days_active),
            ),
            premium=PremiumWindow(
                enabled=self.premium.enabled,
                rate_per_hour=self.premium.rate_per_hour,
                start_time=self.premium.start_time,
                end_time=self.premium.end_time,
            ),
            include_vacation_pay=self.include_vacation_pay,
        )


class SalaryCalculationRequest(BaseModel):
    """Schema for an annual-salary calculation."""

    province: str
    annual_salary: Any
    pay_frequency: PayFrequency = PayFrequency.BI_WEEKLY

    def to_inputs(self) -> SalaryInputs:
        return SalaryInputs(
            province=self.province,
            annual_salary=self.annual_salary,
            pay_frequency=self.pay_frequency,
        )


class TimesheetEntryRequest(BaseModel):
    """One check-in/check-out record."""

    model_config = ConfigDict(populate_by_name=True)

    work_date: str = Field(alias="date", description="YYYY-MM-DD")
    check_in: str
    check_out: str
    unpaid_break_minutes: int = 0
    notes: str | None = None
    id: str | None = None


class TimesheetCalculationRequest(BaseModel):
    """Schema for a timesheet-log calculation."""

    province: str
    hourly_wage: Any
    pay_frequency: PayFrequency = PayFrequency.BI_WEEKLY
    entries: list[TimesheetEntryRequest] = Field(default_factory=list)

    def to_inputs(self) -> TimesheetInputs:
        return TimesheetInputs(
            province=self.province,
            hourly_wage=self.hourly_wage,
            pay_frequency=self.pay_frequency,
            entries=tuple(
                TimesheetEntry(
                    work_date=e.work_date,
                    check_in=e.check_in,
                    check_out=e.check_out,
                    unpaid_break_minutes=e.unpaid_break_minutes,
                    notes=e.notes,
                    entry_id=e.id,
                )
                for e in self.entries
            ),
        )


# ============================================================================
# Response schemas
# ============================================================================


class HoursResponse(BaseModel):
    """Classified hours for the period."""

    regular: Decimal
    overtime_15: Decimal
    overtime_20: Decimal
    premium: Decimal
    total: Decimal

    @classmethod
    def from_buckets(cls, hours: HourBuckets) -> "HoursResponse":
        return cls(
            regular=_hours(hours.regular_hours),
            overtime_15=_hours(hours.overtime_15_hours),
            overtime_20=_hours(hours.overtime_20_hours),
            premium=_hours(hours.premium_hours),
            total=_hours(hours.total_hours),
        )


class EarningsResponse(BaseModel):
    """Gross pay for the period by source."""

    regular_pay: Decimal
    overtime_15_pay: Decimal
    overtime_20_pay: Decimal
    premium_pay: Decimal
    vacation_pay: Decimal

    @classmethod
    def from_breakdown(cls, earnings: EarningsBreakdown) -> "EarningsResponse":
        return cls(
            regular_pay=cents(earnings.regular_pay),
            overtime_15_pay=cents(earnings.overtime_15_pay),
            overtime_20_pay=cents(earnings.overtime_20_pay),
            premium_pay=cents(earnings.premium_pay),
            vacation_pay=cents(earnings.vacation_pay),
        )


class WeekResponse(BaseModel):
    """Classified hours for one ISO week."""

    iso_year: int
    iso_week: int
    days_worked: int
    hours: HoursResponse

    @classmethod
    def from_week(cls, week: WeekBreakdown) -> "WeekResponse":
        return cls(
            iso_year=week.iso_year,
            iso_week=week.iso_week,
            days_worked=week.days_worked,
            hours=HoursResponse.from_buckets(week.hours),
        )


class PeriodResponse(BaseModel):
    """Per-period figures."""

    gross_pay: Decimal
    federal_tax: Decimal
    provincial_tax: Decimal
    pension_deduction: Decimal
    insurance_deduction: Decimal
    total_deductions: Decimal
    net_pay: Decimal


class AnnualResponse(BaseModel):
    """Annual figures."""

    gross_pay: Decimal
    federal_taxable_income: Decimal
    provincial_taxable_income: Decimal
    federal_tax: Decimal
    provincial_tax: Decimal
    pension_deduction: Decimal
    insurance_deduction: Decimal
    total_deductions: Decimal
    net_pay: Decimal


class StatementLineResponse(BaseModel):
    """A pay statement line."""

    line_type: str
    code: str
    description: str
    amount: Decimal
    hours: Decimal | None = None


class CalculationResponse(BaseModel):
    """Schema for a calculation result, rounded to cents."""

    mode: CalculationMode
    jurisdiction: str
    pay_frequency: PayFrequency
    periods_per_year: int
    hours: HoursResponse | None = None
    earnings: EarningsResponse | None = None
    weeks: list[WeekResponse] | None = None
    per_period: PeriodResponse
    annual: AnnualResponse
    take_home_ratio: Decimal
    statement: list[StatementLineResponse]

    @classmethod
    def from_result(
        cls, result: CalculationResult, statement: PayStatement
    ) -> "CalculationResponse":
        annual = result.annual
        return cls(
            mode=result.mode,
            jurisdiction=result.jurisdiction.value,
            pay_frequency=result.pay_frequency,
            periods_per_year=result.periods_per_year,
            hours=HoursResponse.from_buckets(result.hours) if result.hours else None,
            earnings=(
                EarningsResponse.from_breakdown(result.earnings) if result.earnings else None
            ),
            weeks=[WeekResponse.from_week(w) for w in result.weeks] if result.weeks else None,
            per_period=PeriodResponse(
                gross_pay=cents(result.gross_pay_per_period),
                federal_tax=cents(result.federal_tax),
                provincial_tax=cents(result.provincial_tax),
                pension_deduction=cents(result.pension_deduction),
                insurance_deduction=cents(result.insurance_deduction),
                total_deductions=cents(result.total_deductions_per_period),
                net_pay=cents(result.net_pay_per_period),
            ),
            annual=AnnualResponse(
                gross_pay=cents(annual.gross),
                federal_taxable_income=cents(annual.federal_taxable),
                provincial_taxable_income=cents(annual.provincial_taxable),
                federal_tax=cents(annual.federal_tax),
                provincial_tax=cents(annual.provincial_tax),
                pension_deduction=cents(annual.pension),
                insurance_deduction=cents(annual.insurance),
                total_deductions=cents(annual.total),
                net_pay=cents(annual.net),
            ),
            take_home_ratio=result.take_home_ratio.quantize(Decimal("0.0001")),
            statement=[
                StatementLineResponse(
                    line_type=line.line_type.value,
                    code=line.code,
                    description=line.description,
                    amount=line.amount,
                    hours=_hours(line.hours) if line.hours is not None else None,
                )
                for line in statement.lines
            ],
        )


class BracketResponse(BaseModel):
    """A tax bracket; threshold None means unbounded."""

    threshold: Decimal | None
    rate: Decimal


class JurisdictionResponse(BaseModel):
    """Schema for a province/territory rule set."""

    code: str
    name: str
    daily_overtime_threshold: Decimal | None
    weekly_overtime_threshold: Decimal
    double_time_threshold: Decimal | None
    overtime_multiplier: Decimal
    vacation_pay_rate: Decimal
    basic_personal_amount: Decimal
    brackets: list[BracketResponse]

    @classmethod
    def from_rule(cls, rule: JurisdictionRule) -> "JurisdictionResponse":
        return cls(
            code=rule.code.value,
            name=rule.name,
            daily_overtime_threshold=rule.daily_overtime_threshold,
            weekly_overtime_threshold=rule.weekly_overtime_threshold,
            double_time_threshold=rule.double_time_threshold,
            overtime_multiplier=rule.overtime_multiplier,
            vacation_pay_rate=rule.vacation_pay_rate,
            basic_personal_amount=rule.basic_personal_amount,
            brackets=[
                BracketResponse(threshold=b.threshold, rate=b.rate) for b in rule.brackets
            ],
        )


class JurisdictionListResponse(BaseModel):
    """Schema for listing jurisdictions."""

    tax_year: str
    items: list[JurisdictionResponse]
    total: int


class PayFrequencyResponse(BaseModel):
    """A pay frequency and its periods per year."""

    frequency: PayFrequency
    periods_per_year: int


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    context: dict[str, Any] | None = None

