"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from household_budget.api.middleware import RequestIDMiddleware, MetricsMiddleware
from household_budget.api.v1 import debt, envelopes, income
from household_budget.infrastructure.observability.logging import setup_logging
from household_budget.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Household Budget",
        description="Debt payoff, envelope cashflow and income variance calculations",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(debt.router, prefix="/v1", tags=["debt"])
    app.include_router(envelopes.router, prefix="/v1", tags=["envelopes"])
    app.include_router(income.router, prefix="/v1", tags=["income"])

    return app


app = create_app()
