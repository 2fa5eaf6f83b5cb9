"""Payroll calculation engine."""

from canpay_engine.calculators.engine import PayrollEngine
from canpay_engine.calculators.hours_classifier import HoursClassifier
from canpay_engine.calculators.jurisdiction_resolver import JurisdictionResolver
from canpay_engine.calculators.line_builder import LineItemBuilder
from canpay_engine.calculators.tax_calculator import TaxCalculator
from canpay_engine.calculators.types import CalculationResult

__all__ = [
    "PayrollEngine",
    "CalculationResult",
    "HoursClassifier",
    "JurisdictionResolver",
    "LineItemBuilder",
    "TaxCalculator",
]
