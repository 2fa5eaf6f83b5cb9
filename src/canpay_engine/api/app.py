"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from canpay_engine.api.dependencies import get_payroll_engine
from canpay_engine.api.routes import calculations_router, health_router, jurisdictions_router
from canpay_engine.calculators.types import PayrollInputError
from canpay_engine.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup: build the engine (and its rules table) once
    engine = get_payroll_engine()
    logger.info(
        "Loaded %s rules for %d jurisdictions",
        engine.rules.tax_year,
        len(engine.rules.jurisdictions),
    )
    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title="CanPay Engine API",
        description="Canadian payroll estimator",
        version=settings.engine_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(PayrollInputError)
    async def payroll_input_exception_handler(
        request: Request, exc: PayrollInputError
    ) -> JSONResponse:
        """Reject invalid calculation input."""
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "code": exc.code},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(jurisdictions_router, prefix="/api/v1")
    app.include_router(calculations_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
