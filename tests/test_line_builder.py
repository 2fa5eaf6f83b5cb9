"""Tests for line item builder."""

from decimal import Decimal

import pytest

from canpay_engine.calculators.line_builder import LineCandidate, LineItemBuilder, LineType
from canpay_engine.calculators.types import (
    HourlyInputs,
    PremiumWindow,
    SalaryInputs,
    ScheduleInput,
)


class TestLineItemBuilder:
    """Test line item builder functionality."""

    def test_round_to_cents(self):
        """Test rounding to 2 decimal places."""
        # Standard rounding
        assert LineItemBuilder.round_to_cents(Decimal("10.124")) == Decimal("10.12")

        # Half-up rounding
        assert LineItemBuilder.round_to_cents(Decimal("10.125")) == Decimal("10.13")
        assert LineItemBuilder.round_to_cents(Decimal("10.135")) == Decimal("10.14")

    def test_create_earning_line(self):
        """Test creating earning line (positive amount)."""
        line = LineItemBuilder.create_earning_line(
            "REG", "Regular pay", Decimal("1000.004"), hours=Decimal("40")
        )

        assert line.line_type == LineType.EARNING
        assert line.amount == Decimal("1000.00")
        assert line.hours == Decimal("40")

    def test_create_contribution_line(self):
        """Test creating contribution line (negative amount)."""
        line = LineItemBuilder.create_contribution_line("CPP", "Canada Pension Plan", Decimal("81.2403"))

        assert line.line_type == LineType.CONTRIBUTION
        assert line.amount == Decimal("-81.24")

    def test_create_tax_line(self):
        """Test creating tax line (negative amount)."""
        line = LineItemBuilder.create_tax_line("FED", "Federal income tax", Decimal("117.105"))

        assert line.line_type == LineType.TAX
        assert line.amount == Decimal("-117.11")

    def test_create_rounding_line(self):
        """Test creating rounding adjustment line."""
        line = LineItemBuilder.create_rounding_line(Decimal("-0.01"))

        assert line.line_type == LineType.ROUNDING
        assert line.amount == Decimal("-0.01")

    def test_calculate_net_from_lines(self):
        """Test net is the sum of all lines."""
        lines = [
            LineItemBuilder.create_earning_line("REG", "Regular pay", Decimal("1000")),
            LineItemBuilder.create_contribution_line("CPP", "CPP", Decimal("50")),
            LineItemBuilder.create_tax_line("FED", "Federal", Decimal("100")),
        ]
        assert LineItemBuilder.calculate_net_from_lines(lines) == Decimal("850.00")

    def test_calculate_gross_from_lines(self):
        """Test gross is the sum of earning lines only."""
        lines = [
            LineItemBuilder.create_earning_line("REG", "Regular pay", Decimal("1000")),
            LineItemBuilder.create_earning_line("OT15", "Overtime", Decimal("150")),
            LineItemBuilder.create_tax_line("FED", "Federal", Decimal("100")),
        ]
        assert LineItemBuilder.calculate_gross_from_lines(lines) == Decimal("1150.00")

    def test_reconcile_rounding_noop_when_balanced(self):
        lines = [LineItemBuilder.create_earning_line("REG", "Regular pay", Decimal("100"))]
        assert LineItemBuilder.reconcile_rounding(lines, Decimal("100")) == lines

    def test_reconcile_rounding_adds_line(self):
        lines = [LineItemBuilder.create_earning_line("REG", "Regular pay", Decimal("100"))]
        reconciled = LineItemBuilder.reconcile_rounding(lines, Decimal("100.014"))

        assert len(reconciled) == 2
        assert reconciled[-1].line_type == LineType.ROUNDING
        assert reconciled[-1].amount == Decimal("0.01")

    def test_validate_line_signs(self):
        """Test sign validation."""
        valid = [
            LineItemBuilder.create_earning_line("REG", "Regular pay", Decimal("100")),
            LineItemBuilder.create_tax_line("FED", "Federal", Decimal("10")),
        ]
        assert LineItemBuilder.validate_line_signs(valid) == []

        invalid = [
            LineCandidate(LineType.EARNING, "REG", "Regular pay", Decimal("-100")),
            LineCandidate(LineType.TAX, "FED", "Federal", Decimal("10")),
        ]
        errors = LineItemBuilder.validate_line_signs(invalid)
        assert len(errors) == 2
        assert "REG" in errors[0]
        assert "FED" in errors[1]

    def test_sum_by_type(self):
        lines = [
            LineItemBuilder.create_earning_line("REG", "Regular pay", Decimal("100")),
            LineItemBuilder.create_earning_line("VAC", "Vacation pay", Decimal("4")),
            LineItemBuilder.create_contribution_line("EI", "EI", Decimal("1.64")),
        ]
        totals = LineItemBuilder.sum_by_type(lines)

        assert totals[LineType.EARNING] == Decimal("104.00")
        assert totals[LineType.CONTRIBUTION] == Decimal("-1.64")
        assert totals[LineType.TAX] == 0


class TestBuildStatement:
    """Test statements built from engine results."""

    def test_hourly_statement_foots_to_rounded_net(self, engine, ontario_office_inputs):
        result = engine.calculate_hourly(ontario_office_inputs)
        statement = LineItemBuilder.build_statement(result)

        codes = [line.code for line in statement.lines]
        assert codes == ["REG", "CPP", "EI", "FED", "PROV", "ROUNDING"]
        assert statement.gross == Decimal("1500.00")
        assert statement.net == Decimal("1230.73")
        assert statement.lines[-1].amount == Decimal("-0.01")
        assert LineItemBuilder.validate_line_signs(list(statement.lines)) == []

    def test_salary_statement_uses_salary_line(self, engine):
        result = engine.calculate_salary(
            SalaryInputs(province="ON", annual_salary=Decimal("100000"))
        )
        statement = LineItemBuilder.build_statement(result)

        assert statement.lines[0].code == "SALARY"
        assert "REG" not in [line.code for line in statement.lines]
        assert statement.net == LineItemBuilder.round_to_cents(result.net_pay_per_period)

    def test_optional_earning_lines_only_when_nonzero(self, engine):
        inputs = HourlyInputs(
            province="BC",
            hourly_wage=Decimal("20"),
            schedule=ScheduleInput(start_time="22:00", end_time="12:00"),
            premium=PremiumWindow(enabled=True, rate_per_hour=Decimal("1.5")),
            include_vacation_pay=True,
        )
        result = engine.calculate_hourly(inputs)
        statement = LineItemBuilder.build_statement(result)
        codes = [line.code for line in statement.lines]

        # 14h shifts reach double time in BC
        for code in ("REG", "OT15", "OT20", "PREM", "VAC"):
            assert code in codes
        ot20 = next(line for line in statement.lines if line.code == "OT20")
        assert ot20.hours == Decimal("20")

    @pytest.mark.parametrize("salary", ["0", "12345.67", "87654.32", "500000"])
    def test_net_always_matches_result(self, engine, salary):
        result = engine.calculate_salary(SalaryInputs(province="QC", annual_salary=Decimal(salary)))
        statement = LineItemBuilder.build_statement(result)

        assert statement.net == LineItemBuilder.round_to_cents(result.net_pay_per_period)
        assert LineItemBuilder.calculate_net_from_lines(list(statement.lines)) == statement.net
