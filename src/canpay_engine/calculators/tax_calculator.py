"""Progressive income tax and capped payroll contributions."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from canpay_engine.calculators.types import (
    AnnualDeductions,
    FederalRule,
    JurisdictionRule,
    StatutoryContributionRule,
    TaxBracket,
)

ZERO = Decimal("0")


def progressive_tax(income: Decimal, brackets: Sequence[TaxBracket]) -> Decimal:
    """Calculate tax using progressive brackets.

    Brackets are walked in ascending threshold order. Each one taxes the
    slice of income between the previous threshold and its own threshold
    (or all remaining income for the unbounded last bracket). Walking stops
    as soon as income no longer exceeds the previous threshold.
    """
    total_tax = ZERO
    previous_threshold = ZERO

    for bracket in brackets:
        if income <= previous_threshold:
            break

        upper = income if bracket.threshold is None else min(income, bracket.threshold)
        total_tax += (upper - previous_threshold) * bracket.rate

        if bracket.threshold is None:
            break
        previous_threshold = bracket.threshold

    return total_tax


def capped_contribution(gross: Decimal, rule: StatutoryContributionRule) -> Decimal:
    """Calculate a flat-rate contribution above the exemption, up to the cap."""
    contributory = max(ZERO, gross - rule.exemption)
    return min(contributory * rule.rate, rule.max_annual)


class TaxCalculator:
    """Runs the annual deduction pipeline.

    Deductions are computed in a fixed order, all on annual figures:
    1) Pension contribution (exemption floor, rate, annual cap)
    2) Insurance premium (rate, annual cap)
    3) Federal income tax on gross less federal BPA, pension and insurance
    4) Provincial income tax on gross less provincial BPA, pension and insurance
    """

    def __init__(
        self,
        federal: FederalRule,
        pension: StatutoryContributionRule,
        insurance: StatutoryContributionRule,
    ):
        self.federal = federal
        self.pension = pension
        self.insurance = insurance

    def calculate_annual_deductions(
        self,
        annual_gross: Decimal,
        jurisdiction: JurisdictionRule,
    ) -> AnnualDeductions:
        """Calculate all statutory deductions for an annual gross."""
        pension = capped_contribution(annual_gross, self.pension)
        insurance = capped_contribution(annual_gross, self.insurance)

        federal_taxable = self._taxable_income(
            annual_gross, self.federal.basic_personal_amount, pension, insurance
        )
        provincial_taxable = self._taxable_income(
            annual_gross, jurisdiction.basic_personal_amount, pension, insurance
        )

        return AnnualDeductions(
            gross=annual_gross,
            pension=pension,
            insurance=insurance,
            federal_taxable=federal_taxable,
            provincial_taxable=provincial_taxable,
            federal_tax=progressive_tax(federal_taxable, self.federal.brackets),
            provincial_tax=progressive_tax(provincial_taxable, jurisdiction.brackets),
        )

    @staticmethod
    def _taxable_income(
        gross: Decimal,
        basic_personal_amount: Decimal,
        pension: Decimal,
        insurance: Decimal,
    ) -> Decimal:
        return max(ZERO, gross - basic_personal_amount - pension - insurance)
