"""CanPay Command Line Interface.

Runs the payroll estimator without the HTTP service and prints the same
JSON the API returns.

Usage:
    canpay hourly --province ON --wage 20 --start 09:00 --end 17:00 --break 30
    canpay salary --province ON --salary 100000 --frequency bi-weekly
    canpay timesheet --province BC --wage 25 --frequency weekly --file entries.json
    canpay jurisdictions
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Callable

from pydantic import ValidationError

from canpay_engine.api.schemas import (
    CalculationResponse,
    JurisdictionResponse,
    TimesheetEntryRequest,
)
from canpay_engine.calculators.engine import PayrollEngine
from canpay_engine.calculators.line_builder import LineItemBuilder
from canpay_engine.calculators.types import (
    CalculationResult,
    HourlyInputs,
    PayFrequency,
    PayrollInputError,
    PremiumWindow,
    SalaryInputs,
    ScheduleInput,
    TimesheetEntry,
    TimesheetInputs,
)
from canpay_engine.config import configure_logging

logger = logging.getLogger(__name__)

DAY_NAMES = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_INPUT_ERROR = 2


def parse_days(value: str) -> tuple[bool, ...]:
    """Parse "mon,tue,wed" into seven Sun..Sat flags."""
    names = {part.strip().lower()[:3] for part in value.split(",") if part.strip()}
    unknown = names - set(DAY_NAMES)
    if unknown:
        raise argparse.ArgumentTypeError(f"Unknown day(s): {', '.join(sorted(unknown))}")
    return tuple(day in names for day in DAY_NAMES)


class CanPayCli:
    """CanPay Command Line Interface."""

    def __init__(self, engine: PayrollEngine | None = None) -> None:
        self.engine = engine or PayrollEngine()
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="canpay",
            description="Canadian payroll estimator",
        )
        parser.add_argument(
            "--log-level",
            type=str,
            default=None,
            help="Logging level (default: $LOG_LEVEL or INFO)",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")
        frequencies = [f.value for f in PayFrequency]

        # hourly command
        hourly = subparsers.add_parser(
            "hourly",
            help="Bi-weekly estimate from an hourly wage and weekly schedule",
        )
        hourly.add_argument("--province", required=True, help="Province code or name")
        hourly.add_argument("--wage", required=True, help="Hourly wage")
        hourly.add_argument("--start", default="09:00", help="Shift start HH:MM (default: 09:00)")
        hourly.add_argument("--end", default="17:00", help="Shift end HH:MM (default: 17:00)")
        hourly.add_argument(
            "--break",
            dest="break_minutes",
            type=int,
            default=30,
            help="Unpaid break minutes per shift (default: 30)",
        )
        hourly.add_argument(
            "--days",
            type=parse_days,
            default=parse_days("mon,tue,wed,thu,fri"),
            help="Comma-separated working days (default: mon,tue,wed,thu,fri)",
        )
        hourly.add_argument("--premium-rate", help="Shift premium per hour")
        hourly.add_argument("--premium-start", default="00:00", help="Premium window start")
        hourly.add_argument("--premium-end", default="06:00", help="Premium window end")
        hourly.add_argument(
            "--vacation-pay",
            action="store_true",
            help="Add the province's vacation pay percentage to gross",
        )

        # salary command
        salary = subparsers.add_parser(
            "salary",
            help="Per-period estimate from an annual salary",
        )
        salary.add_argument("--province", required=True, help="Province code or name")
        salary.add_argument("--salary", required=True, help="Annual salary")
        salary.add_argument(
            "--frequency",
            choices=frequencies,
            default=PayFrequency.BI_WEEKLY.value,
            help="Pay frequency (default: bi-weekly)",
        )

        # timesheet command
        timesheet = subparsers.add_parser(
            "timesheet",
            help="Estimate from a JSON timesheet log",
        )
        timesheet.add_argument("--province", required=True, help="Province code or name")
        timesheet.add_argument("--wage", required=True, help="Hourly wage")
        timesheet.add_argument(
            "--frequency",
            choices=frequencies,
            default=PayFrequency.BI_WEEKLY.value,
            help="Pay frequency the log represents (default: bi-weekly)",
        )
        timesheet.add_argument(
            "--file",
            type=Path,
            required=True,
            help='JSON list of {"date", "check_in", "check_out", "unpaid_break_minutes"}',
        )

        # jurisdictions command
        subparsers.add_parser(
            "jurisdictions",
            help="List provinces/territories and their rules",
        )

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)
        configure_logging(parsed.log_level.upper() if parsed.log_level else None)

        if not parsed.command:
            self.parser.print_help()
            return EXIT_USAGE

        handlers: dict[str, Callable[[argparse.Namespace], int]] = {
            "hourly": self._cmd_hourly,
            "salary": self._cmd_salary,
            "timesheet": self._cmd_timesheet,
            "jurisdictions": self._cmd_jurisdictions,
        }
        handler = handlers[parsed.command]

        try:
            return handler(parsed)
        except PayrollInputError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return EXIT_INPUT_ERROR

    def _print_result(self, result: CalculationResult) -> int:
        response = CalculationResponse.from_result(
            result, LineItemBuilder.build_statement(result)
        )
        print(response.model_dump_json(indent=2))
        return EXIT_OK

    def _cmd_hourly(self, args: argparse.Namespace) -> int:
        """Hourly schedule estimate."""
        premium = PremiumWindow()
        if args.premium_rate is not None:
            premium = PremiumWindow(
                enabled=True,
                rate_per_hour=args.premium_rate,
                start_time=args.premium_start,
                end_time=args.premium_end,
            )

        inputs = HourlyInputs(
            province=args.province,
            hourly_wage=args.wage,
            schedule=ScheduleInput(
                start_time=args.start,
                end_time=args.end,
                unpaid_break_minutes=args.break_minutes,
                days_active=args.days,
            ),
            premium=premium,
            include_vacation_pay=args.vacation_pay,
        )
        return self._print_result(self.engine.calculate_hourly(inputs))

    def _cmd_salary(self, args: argparse.Namespace) -> int:
        """Annual salary estimate."""
        inputs = SalaryInputs(
            province=args.province,
            annual_salary=args.salary,
            pay_frequency=PayFrequency(args.frequency),
        )
        return self._print_result(self.engine.calculate_salary(inputs))

    def _cmd_timesheet(self, args: argparse.Namespace) -> int:
        """Timesheet log estimate."""
        try:
            entries = self._load_entries(args.file)
        except (OSError, ValueError) as e:
            print(f"ERROR: cannot read timesheet {args.file}: {e}", file=sys.stderr)
            return EXIT_INPUT_ERROR

        logger.debug("Loaded %d timesheet entries from %s", len(entries), args.file)
        inputs = TimesheetInputs(
            province=args.province,
            hourly_wage=args.wage,
            pay_frequency=PayFrequency(args.frequency),
            entries=entries,
        )
        return self._print_result(self.engine.calculate_timesheet(inputs))

    def _cmd_jurisdictions(self, args: argparse.Namespace) -> int:
        """List jurisdictions."""
        items = [
            JurisdictionResponse.from_rule(rule).model_dump(mode="json")
            for rule in self.engine.resolver.all()
        ]
        print(json.dumps(items, indent=2))
        return EXIT_OK

    @staticmethod
    def _load_entries(path: Path) -> tuple[TimesheetEntry, ...]:
        """Read entries from a JSON list (or an object with an "entries" list).

        Raises:
            ValueError: If the file is not valid JSON or an entry is malformed
        """
        data = json.loads(path.read_text(encoding="utf-8"))
        if isinstance(data, dict):
            data = data.get("entries", [])
        if not isinstance(data, list):
            raise ValueError("expected a list of entries")

        entries = []
        for raw in data:
            try:
                entry = TimesheetEntryRequest.model_validate(raw)
            except ValidationError as e:
                raise ValueError(str(e)) from None
            entries.append(
                TimesheetEntry(
                    work_date=entry.work_date,
                    check_in=entry.check_in,
                    check_out=entry.check_out,
                    unpaid_break_minutes=entry.unpaid_break_minutes,
                    notes=entry.notes,
                    entry_id=entry.id,
                )
            )
        return tuple(entries)


def main() -> int:
    """CLI entry point."""
    cli = CanPayCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
