"""Property-based tests for calculation invariants.

These tests use hypothesis to generate schedules, timesheets and
salaries and verify that invariants always hold, regardless of the
province or the shape of the input.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st

from canpay_engine.calculators.engine import PayrollEngine
from canpay_engine.calculators.hours_classifier import HoursClassifier, paid_minutes
from canpay_engine.calculators.line_builder import LineItemBuilder
from canpay_engine.calculators.rules import DEFAULT_RULES
from canpay_engine.calculators.time_math import MINUTES_PER_DAY, overlap_minutes
from canpay_engine.calculators.types import (
    HourlyInputs,
    PayFrequency,
    Province,
    SalaryInputs,
    ScheduleInput,
    TimesheetEntry,
    TimesheetInputs,
)

ENGINE = PayrollEngine()

provinces = st.sampled_from(list(Province))
minute_of_day = st.integers(min_value=0, max_value=MINUTES_PER_DAY - 1)
clock = minute_of_day.map(lambda m: f"{m // 60:02d}:{m % 60:02d}")
amounts = st.decimals(
    min_value=Decimal("0"),
    max_value=Decimal("1000000"),
    places=2,
    allow_nan=False,
    allow_infinity=False,
)
wages = st.decimals(
    min_value=Decimal("0"),
    max_value=Decimal("500"),
    places=2,
    allow_nan=False,
    allow_infinity=False,
)
day_flags = st.tuples(*[st.booleans()] * 7)


@st.composite
def timesheet_entries(draw):
    start = date(2024, 12, 1)
    count = draw(st.integers(min_value=0, max_value=20))
    return tuple(
        TimesheetEntry(
            work_date=start + timedelta(days=draw(st.integers(min_value=0, max_value=60))),
            check_in=draw(clock),
            check_out=draw(clock),
            unpaid_break_minutes=draw(st.integers(min_value=0, max_value=90)),
        )
        for _ in range(count)
    )


class TestClassificationInvariants:
    """Hour buckets are a partition of paid time."""

    @given(province=provinces, minutes=st.integers(min_value=0, max_value=MINUTES_PER_DAY))
    def test_day_buckets_partition_minutes(self, province, minutes):
        day = HoursClassifier(DEFAULT_RULES.jurisdictions[province]).classify_day(minutes)

        assert day.regular + day.overtime_15 + day.overtime_20 == minutes
        assert min(day.regular, day.overtime_15, day.overtime_20) >= 0

    @given(
        province=provinces,
        start=clock,
        end=clock,
        break_minutes=st.integers(min_value=0, max_value=120),
        flags=day_flags,
    )
    def test_week_total_equals_paid_time(self, province, start, end, break_minutes, flags):
        rule = DEFAULT_RULES.jurisdictions[province]
        schedule = ScheduleInput(
            start_time=start, end_time=end, unpaid_break_minutes=break_minutes, days_active=flags
        )
        week = HoursClassifier(rule).classify_schedule(schedule)

        assert week.total_minutes == sum(flags) * paid_minutes(start, end, break_minutes)
        assert week.regular_minutes <= int(rule.weekly_overtime_threshold * 60)

    @settings(max_examples=50)
    @given(province=provinces, entries=timesheet_entries())
    def test_timesheet_weeks_sum_to_total(self, province, entries):
        result = HoursClassifier(DEFAULT_RULES.jurisdictions[province]).classify_timesheet(entries)

        assert sum(w.hours.total_minutes for w in result.weeks) == result.hours.total_minutes
        assert sum(w.days_worked for w in result.weeks) == len({e.work_date for e in entries})
        assert result.hours.total_minutes == sum(
            paid_minutes(e.check_in, e.check_out, e.unpaid_break_minutes) for e in entries
        )


class TestOverlapInvariants:
    """Premium overlap is bounded and symmetric."""

    @given(a_start=minute_of_day, a_end=minute_of_day, b_start=minute_of_day, b_end=minute_of_day)
    def test_overlap_bounded_and_symmetric(self, a_start, a_end, b_start, b_end):
        overlap = overlap_minutes(a_start, a_end, b_start, b_end)
        a_len = (a_end - a_start) % MINUTES_PER_DAY
        b_len = (b_end - b_start) % MINUTES_PER_DAY

        assert 0 <= overlap <= min(a_len, b_len)
        assert overlap == overlap_minutes(b_start, b_end, a_start, a_end)

    @given(start=minute_of_day, end=minute_of_day)
    def test_window_overlaps_itself_fully(self, start, end):
        assert overlap_minutes(start, end, start, end) == (end - start) % MINUTES_PER_DAY


class TestDeductionInvariants:
    """Net pay never exceeds gross and per-period figures divide the annual."""

    @given(province=provinces, salary=amounts, frequency=st.sampled_from(list(PayFrequency)))
    def test_salary_result_consistent(self, province, salary, frequency):
        result = ENGINE.calculate_salary(
            SalaryInputs(province=province, annual_salary=salary, pay_frequency=frequency)
        )
        annual = result.annual

        assert annual.pension <= DEFAULT_RULES.pension.max_annual
        assert annual.insurance <= DEFAULT_RULES.insurance.max_annual
        assert min(annual.federal_tax, annual.provincial_tax, annual.pension, annual.insurance) >= 0
        assert 0 <= result.net_pay_annual <= result.gross_pay_annual
        assert result.net_pay_per_period == result.net_pay_annual / frequency.periods_per_year

    @settings(max_examples=50)
    @given(province=provinces, wage=wages, start=clock, end=clock, flags=day_flags)
    def test_hourly_statement_foots(self, province, wage, start, end, flags):
        result = ENGINE.calculate_hourly(
            HourlyInputs(
                province=province,
                hourly_wage=wage,
                schedule=ScheduleInput(start_time=start, end_time=end, days_active=flags),
            )
        )
        statement = LineItemBuilder.build_statement(result)

        assert statement.net == LineItemBuilder.round_to_cents(result.net_pay_per_period)
        assert LineItemBuilder.validate_line_signs(list(statement.lines)) == []
        assert result.gross_pay_annual == result.gross_pay_per_period * 26

    @settings(max_examples=30)
    @given(province=provinces, wage=wages, entries=timesheet_entries())
    def test_timesheet_gross_matches_buckets(self, province, wage, entries):
        result = ENGINE.calculate_timesheet(
            TimesheetInputs(province=province, hourly_wage=wage, entries=entries)
        )

        assert result.earnings.total == result.gross_pay_per_period
        assert result.gross_pay_annual == result.gross_pay_per_period * 26
        assert result.earnings.premium_pay == 0

