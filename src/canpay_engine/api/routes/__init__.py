"""API routes."""

from canpay_engine.api.routes.calculations import router as calculations_router
from canpay_engine.api.routes.health import router as health_router
from canpay_engine.api.routes.jurisdictions import router as jurisdictions_router

__all__ = ["calculations_router", "health_router", "jurisdictions_router"]
