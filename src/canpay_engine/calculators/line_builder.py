"""Pay statement line builder."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from canpay_engine.calculators.types import CalculationResult


class LineType(str, Enum):
    """Pay statement line types."""

    EARNING = "EARNING"
    CONTRIBUTION = "CONTRIBUTION"
    TAX = "TAX"
    ROUNDING = "ROUNDING"


@dataclass(frozen=True)
class LineCandidate:
    """One line on a pay statement."""

    line_type: LineType
    code: str
    description: str
    amount: Decimal  # Final amount (signed per conventions)
    hours: Decimal | None = None
    rate: Decimal | None = None


@dataclass(frozen=True)
class PayStatement:
    """Rounded, signed lines for one pay period."""

    lines: tuple[LineCandidate, ...]
    gross: Decimal
    net: Decimal


class LineItemBuilder:
    """Builds pay statement lines from a calculation result.

    Sign conventions:
    - EARNING: positive
    - CONTRIBUTION (CPP, EI): negative
    - TAX (federal, provincial): negative
    - ROUNDING: either sign

    Rounding:
    - Results are computed unrounded
    - Every line is rounded half-up to cents
    - An explicit rounding line absorbs penny drift against the rounded net
    """

    OUTPUT_PRECISION = Decimal("0.01")

    @staticmethod
    def round_to_cents(amount: Decimal) -> Decimal:
        """Round amount to 2 decimal places (cents)."""
        return amount.quantize(LineItemBuilder.OUTPUT_PRECISION, rounding=ROUND_HALF_UP)

    @staticmethod
    def create_earning_line(
        code: str,
        description: str,
        amount: Decimal,
        hours: Decimal | None = None,
        rate: Decimal | None = None,
    ) -> LineCandidate:
        """Create an earning line item (positive amount)."""
        return LineCandidate(
            line_type=LineType.EARNING,
            code=code,
            description=description,
            amount=LineItemBuilder.round_to_cents(abs(amount)),
            hours=hours,
            rate=rate,
        )

    @staticmethod
    def create_contribution_line(code: str, description: str, amount: Decimal) -> LineCandidate:
        """Create a statutory contribution line item (negative amount)."""
        return LineCandidate(
            line_type=LineType.CONTRIBUTION,
            code=code,
            description=description,
            amount=-LineItemBuilder.round_to_cents(abs(amount)),
        )

    @staticmethod
    def create_tax_line(code: str, description: str, amount: Decimal) -> LineCandidate:
        """Create an income tax line item (negative amount)."""
        return LineCandidate(
            line_type=LineType.TAX,
            code=code,
            description=description,
            amount=-LineItemBuilder.round_to_cents(abs(amount)),
        )

    @staticmethod
    def create_rounding_line(amount: Decimal) -> LineCandidate:
        """Create a rounding adjustment line item.

        Amount can be positive or negative to reconcile penny drift.
        """
        return LineCandidate(
            line_type=LineType.ROUNDING,
            code="ROUNDING",
            description="Rounding adjustment",
            amount=LineItemBuilder.round_to_cents(amount),
        )

    @staticmethod
    def calculate_gross_from_lines(lines: list[LineCandidate]) -> Decimal:
        """GROSS = Σ(EARNING)"""
        gross = sum(
            (line.amount for line in lines if line.line_type == LineType.EARNING),
            Decimal("0"),
        )
        return LineItemBuilder.round_to_cents(gross)

    @staticmethod
    def calculate_net_from_lines(lines: list[LineCandidate]) -> Decimal:
        """NET = Σ(all lines)"""
        return LineItemBuilder.round_to_cents(
            sum((line.amount for line in lines), Decimal("0"))
        )

    @staticmethod
    def reconcile_rounding(
        lines: list[LineCandidate], expected_net: Decimal
    ) -> list[LineCandidate]:
        """Add rounding adjustment line if needed to reconcile net.

        Does not modify existing lines.
        """
        calculated_net = LineItemBuilder.calculate_net_from_lines(lines)
        diff = LineItemBuilder.round_to_cents(expected_net) - calculated_net

        if diff == 0:
            return lines

        return lines + [LineItemBuilder.create_rounding_line(diff)]

    @staticmethod
    def validate_line_signs(lines: list[LineCandidate]) -> list[str]:
        """Validate that all line items have correct signs.

        Returns list of error messages (empty if all valid).
        """
        errors: list[str] = []

        for i, line in enumerate(lines):
            if line.line_type == LineType.EARNING and line.amount < 0:
                errors.append(
                    f"Line {i} ({line.code}) has negative amount {line.amount}, expected positive"
                )
            elif line.line_type in (LineType.CONTRIBUTION, LineType.TAX) and line.amount > 0:
                errors.append(
                    f"Line {i} ({line.code}) has positive amount {line.amount}, expected negative"
                )

        return errors

    @staticmethod
    def sum_by_type(lines: list[LineCandidate]) -> dict[LineType, Decimal]:
        """Sum line amounts by type."""
        totals: dict[LineType, Decimal] = {lt: Decimal("0") for lt in LineType}
        for line in lines:
            totals[line.line_type] += line.amount
        return totals

    @classmethod
    def build_statement(cls, result: CalculationResult) -> PayStatement:
        """Build the per-period pay statement for a result.

        Earning lines are skipped when zero, except regular pay (or salary)
        which is always shown.
        """
        lines: list[LineCandidate] = []

        if result.earnings is None:
            lines.append(
                cls.create_earning_line("SALARY", "Salary", result.gross_pay_per_period)
            )
        else:
            hours = result.hours
            earnings = result.earnings
            lines.append(
                cls.create_earning_line(
                    "REG",
                    "Regular pay",
                    earnings.regular_pay,
                    hours=hours.regular_hours if hours else None,
                )
            )
            optional = [
                ("OT15", "Overtime 1.5x", earnings.overtime_15_pay,
                 hours.overtime_15_hours if hours else None),
                ("OT20", "Overtime 2.0x", earnings.overtime_20_pay,
                 hours.overtime_20_hours if hours else None),
                ("PREM", "Shift premium", earnings.premium_pay,
                 hours.premium_hours if hours else None),
                ("VAC", "Vacation pay", earnings.vacation_pay, None),
            ]
            for code, description, amount, line_hours in optional:
                if amount > 0:
                    lines.append(
                        cls.create_earning_line(code, description, amount, hours=line_hours)
                    )

        lines.extend(
            [
                cls.create_contribution_line("CPP", "Canada Pension Plan", result.pension_deduction),
                cls.create_contribution_line("EI", "Employment Insurance", result.insurance_deduction),
                cls.create_tax_line("FED", "Federal income tax", result.federal_tax),
                cls.create_tax_line("PROV", "Provincial income tax", result.provincial_tax),
            ]
        )

        # Earning lines may drift from the rounded gross too; reconcile against
        # the rounded net so the statement always foots.
        lines = cls.reconcile_rounding(lines, result.net_pay_per_period)

        return PayStatement(
            lines=tuple(lines),
            gross=cls.calculate_gross_from_lines(lines),
            net=cls.calculate_net_from_lines(lines),
        )
