"""FastAPI dependencies for dependency injection."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from canpay_engine.calculators.engine import PayrollEngine


@lru_cache(maxsize=1)
def get_payroll_engine() -> PayrollEngine:
    """Shared engine over the static rules table."""
    return PayrollEngine()


# Type aliases for cleaner dependency injection
Engine = Annotated[PayrollEngine, Depends(get_payroll_engine)]
