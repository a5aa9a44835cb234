"""FastAPI application factory"""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import JSONResponse, Response

from roundup_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from roundup_ledger.api.v1 import returns, transactions
from roundup_ledger.infrastructure.observability.logging import setup_logging
from roundup_ledger.config import settings

API_PREFIX = "/blackrock/challenge/v1"

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Round-up Savings Ledger",
        description="Expense validation, savings rules and retirement projections",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Raw inputs are left out of the error body; NaN and inf cannot be rendered as JSON
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [{key: value for key, value in error.items() if key != "input"} for error in exc.errors()]
        return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(transactions.router, prefix=API_PREFIX, tags=["transactions"])
    app.include_router(returns.router, prefix=API_PREFIX, tags=["returns"])

    return app


app = create_app()
