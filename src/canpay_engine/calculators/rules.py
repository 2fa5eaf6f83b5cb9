"""Static 2025 payroll rules: federal, CPP, EI and provincial/territorial.

Estimates indexed for 2025. CPP2 (second additional contribution) is folded
into a slightly higher effective cap rather than modelled separately.
"""

from __future__ import annotations

from decimal import Decimal
from types import MappingProxyType

from canpay_engine.calculators.types import (
    FederalRule,
    JurisdictionRule,
    Province,
    RuleSet,
    StatutoryContributionRule,
    TaxBracket,
)

TAX_YEAR = "2025"


def _brackets(*pairs: tuple[str | None, str]) -> tuple[TaxBracket, ...]:
    """Build brackets from (threshold, rate) string pairs; None = unbounded."""
    return tuple(
        TaxBracket(
            threshold=Decimal(threshold) if threshold is not None else None,
            rate=Decimal(rate),
        )
        for threshold, rate in pairs
    )


FEDERAL = FederalRule(
    basic_personal_amount=Decimal("15950"),
    brackets=_brackets(
        ("57375", "0.15"),
        ("114750", "0.205"),
        ("177722", "0.26"),
        ("253865", "0.29"),
        (None, "0.33"),
    ),
)

CPP = StatutoryContributionRule(
    name="CPP",
    rate=Decimal("0.0595"),
    max_annual=Decimal("4055.25"),  # Base + enhanced
    exemption=Decimal("3500"),
)

EI = StatutoryContributionRule(
    name="EI",
    rate=Decimal("0.0164"),
    max_annual=Decimal("1077.48"),
)


def _province(
    code: Province,
    name: str,
    *,
    daily: str | None,
    weekly: str,
    bpa: str,
    brackets: tuple[TaxBracket, ...],
    double_time: str | None = None,
    vacation: str = "0.04",
) -> JurisdictionRule:
    return JurisdictionRule(
        code=code,
        name=name,
        daily_overtime_threshold=Decimal(daily) if daily is not None else None,
        weekly_overtime_threshold=Decimal(weekly),
        double_time_threshold=Decimal(double_time) if double_time is not None else None,
        vacation_pay_rate=Decimal(vacation),
        basic_personal_amount=Decimal(bpa),
        brackets=brackets,
    )


JURISDICTIONS = MappingProxyType(
    {
        rule.code: rule
        for rule in (
            _province(
                Province.AB, "Alberta",
                daily="8", weekly="44", bpa="22250",
                brackets=_brackets(("151230", "0.10"), (None, "0.12")),
            ),
            _province(
                Province.BC, "British Columbia",
                daily="8", weekly="40", double_time="12", bpa="12580",
                brackets=_brackets(("48000", "0.0506"), ("96000", "0.077"), (None, "0.105")),
            ),
            _province(
                Province.MB, "Manitoba",
                daily="8", weekly="40", bpa="16000",
                brackets=_brackets(("47000", "0.108"), (None, "0.1275")),
            ),
            _province(
                Province.NB, "New Brunswick",
                daily=None, weekly="44", bpa="13500",
                brackets=_brackets(("49800", "0.094"), (None, "0.14")),
            ),
            _province(
                Province.NL, "Newfoundland and Labrador",
                daily=None, weekly="40", bpa="10800",
                brackets=_brackets(("43000", "0.087"), (None, "0.145")),
            ),
            _province(
                Province.NS, "Nova Scotia",
                daily=None, weekly="48", bpa="11481",
                brackets=_brackets(("32000", "0.0879"), (None, "0.1495")),
            ),
            _province(
                Province.ON, "Ontario",
                daily=None, weekly="44", bpa="12399",
                brackets=_brackets(("52446", "0.0505"), ("104891", "0.0915"), (None, "0.1116")),
            ),
            _province(
                Province.PE, "Prince Edward Island",
                daily=None, weekly="48", bpa="13500",
                brackets=_brackets(("33000", "0.098"), (None, "0.138")),
            ),
            _province(
                Province.QC, "Quebec",
                daily=None, weekly="40", bpa="18050",
                brackets=_brackets(("51780", "0.14"), ("103545", "0.19"), (None, "0.24")),
            ),
            _province(
                Province.SK, "Saskatchewan",
                daily="8", weekly="40", bpa="18450",
                brackets=_brackets(("52000", "0.105"), (None, "0.125")),
            ),
            _province(
                Province.NT, "Northwest Territories",
                daily="8", weekly="40", bpa="17300",
                brackets=_brackets(("52000", "0.059"), (None, "0.086")),
            ),
            _province(
                Province.NU, "Nunavut",
                daily="8", weekly="40", bpa="18500",
                brackets=_brackets(("54000", "0.04"), (None, "0.07")),
            ),
            _province(
                Province.YT, "Yukon",
                daily="8", weekly="40", bpa="15950",
                brackets=_brackets(("57375", "0.064"), (None, "0.09")),
            ),
        )
    }
)

DEFAULT_RULES = RuleSet(
    tax_year=TAX_YEAR,
    federal=FEDERAL,
    pension=CPP,
    insurance=EI,
    jurisdictions=JURISDICTIONS,
)
