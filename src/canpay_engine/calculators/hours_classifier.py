"""Regular/overtime hour classification under provincial standards."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from canpay_engine.calculators.time_math import (
    InvalidTimeFormatError,
    overlap_minutes,
    shift_minutes,
    to_minutes,
)
from canpay_engine.calculators.types import (
    HourBuckets,
    JurisdictionRule,
    PayrollInputError,
    PremiumWindow,
    ScheduleInput,
    TimesheetEntry,
    WeekBreakdown,
)

logger = logging.getLogger(__name__)


class InvalidScheduleError(PayrollInputError):
    """Raised when a schedule or timesheet entry is structurally invalid."""

    code = "INVALID_SCHEDULE"


@dataclass(frozen=True)
class DayBuckets:
    """Classified minutes for a single worked day."""

    regular: int
    overtime_15: int = 0
    overtime_20: int = 0


@dataclass(frozen=True)
class TimesheetClassification:
    """Totals for a timesheet plus the per-week detail."""

    hours: HourBuckets
    weeks: tuple[WeekBreakdown, ...]


def _hours_to_minutes(hours: Decimal | None) -> int | None:
    if hours is None:
        return None
    return int(hours * 60)


def paid_minutes(start: str, end: str, unpaid_break_minutes: int) -> int:
    """Minutes of a shift less its unpaid break, never negative."""
    if unpaid_break_minutes < 0:
        raise InvalidScheduleError(
            f"Unpaid break must not be negative, got {unpaid_break_minutes}"
        )
    return max(0, shift_minutes(start, end) - unpaid_break_minutes)


def parse_work_date(value: date | str) -> date:
    """Parse an ISO "YYYY-MM-DD" timesheet date."""
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise InvalidTimeFormatError(value, "expected date YYYY-MM-DD") from None


class HoursClassifier:
    """Splits paid time into regular, 1.5x and 2.0x buckets.

    Classification order (per week):
    1) Daily rule on each worked day, if the jurisdiction has one: minutes
       past the double-time threshold go to 2.0x, minutes past the daily
       threshold go to 1.5x, the rest are regular
    2) Regular minutes from all days are summed
    3) Weekly rule: regular minutes past the weekly threshold move to 1.5x

    Daily overtime is excluded from the weekly sum, so weekly overtime is
    added on top of daily overtime rather than taking the greater of the
    two. This is an approximation of provincial standards, not a legal
    ruling.

    All arithmetic is in whole minutes.
    """

    def __init__(self, rule: JurisdictionRule):
        self.rule = rule
        self._daily_threshold = _hours_to_minutes(rule.daily_overtime_threshold)
        self._double_time_threshold = _hours_to_minutes(rule.double_time_threshold)
        self._weekly_threshold = _hours_to_minutes(rule.weekly_overtime_threshold)

    def classify_day(self, minutes: int) -> DayBuckets:
        """Apply the daily overtime rule to one day's paid minutes."""
        daily = self._daily_threshold
        if daily is None:
            return DayBuckets(regular=minutes)

        double = self._double_time_threshold
        if double is not None and minutes > double:
            return DayBuckets(
                regular=daily,
                overtime_15=double - daily,
                overtime_20=minutes - double,
            )
        if minutes > daily:
            return DayBuckets(regular=daily, overtime_15=minutes - daily)
        return DayBuckets(regular=minutes)

    def classify_week(self, daily_minutes: Iterable[int]) -> HourBuckets:
        """Classify one week given the paid minutes of each worked day."""
        weekly_regular = 0
        overtime_15 = 0
        overtime_20 = 0

        for minutes in daily_minutes:
            day = self.classify_day(minutes)
            weekly_regular += day.regular
            overtime_15 += day.overtime_15
            overtime_20 += day.overtime_20

        if weekly_regular > self._weekly_threshold:
            overtime_15 += weekly_regular - self._weekly_threshold
            weekly_regular = self._weekly_threshold

        return HourBuckets(
            regular_minutes=weekly_regular,
            overtime_15_minutes=overtime_15,
            overtime_20_minutes=overtime_20,
        )

    def classify_schedule(
        self,
        schedule: ScheduleInput,
        premium: PremiumWindow | None = None,
    ) -> HourBuckets:
        """Classify one week of a fixed schedule, including premium minutes."""
        if len(schedule.days_active) != 7:
            raise InvalidScheduleError(
                f"Expected 7 active-day flags (Sun..Sat), got {len(schedule.days_active)}"
            )

        day_minutes = paid_minutes(
            schedule.start_time, schedule.end_time, schedule.unpaid_break_minutes
        )
        days = schedule.active_day_count

        premium_per_day = 0
        if premium is not None and premium.enabled:
            premium_per_day = overlap_minutes(
                to_minutes(schedule.start_time),
                to_minutes(schedule.end_time),
                to_minutes(premium.start_time),
                to_minutes(premium.end_time),
            )

        week = self.classify_week([day_minutes] * days)
        return HourBuckets(
            regular_minutes=week.regular_minutes,
            overtime_15_minutes=week.overtime_15_minutes,
            overtime_20_minutes=week.overtime_20_minutes,
            premium_minutes=premium_per_day * days,
        )

    def classify_timesheet(self, entries: Sequence[TimesheetEntry]) -> TimesheetClassification:
        """Classify a log of entries grouped by date, then by ISO week.

        Several entries on one date count as a single worked day. An entry
        belongs to its check-in date even when it runs past midnight.
        """
        minutes_by_date: dict[date, int] = defaultdict(int)
        for entry in entries:
            work_date = parse_work_date(entry.work_date)
            minutes_by_date[work_date] += paid_minutes(
                entry.check_in, entry.check_out, entry.unpaid_break_minutes
            )

        dates_by_week: dict[tuple[int, int], list[date]] = defaultdict(list)
        for work_date in minutes_by_date:
            iso = work_date.isocalendar()
            dates_by_week[(iso[0], iso[1])].append(work_date)

        total = HourBuckets()
        weeks: list[WeekBreakdown] = []
        for (iso_year, iso_week), dates in sorted(dates_by_week.items()):
            week = self.classify_week(minutes_by_date[d] for d in sorted(dates))
            weeks.append(
                WeekBreakdown(
                    iso_year=iso_year,
                    iso_week=iso_week,
                    days_worked=len(dates),
                    hours=week,
                )
            )
            total = total + week

        logger.debug(
            "Classified %d timesheet entries into %d ISO weeks for %s",
            len(entries),
            len(weeks),
            self.rule.code.value,
        )
        return TimesheetClassification(hours=total, weeks=tuple(weeks))
