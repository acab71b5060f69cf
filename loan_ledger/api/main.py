"""FastAPI application factory"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from loan_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from loan_ledger.api.v1 import backup, deposits, loans, stats
from loan_ledger.infrastructure.database.models import Base
from loan_ledger.infrastructure.database.session import engine
from loan_ledger.infrastructure.observability.logging import setup_logging
from loan_ledger.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Loan Ledger Gateway",
        description="Loan and deposit sync service with derived balances",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(loans.router, prefix="/v1", tags=["loans"])
    app.include_router(deposits.router, prefix="/v1", tags=["deposits"])
    app.include_router(backup.router, prefix="/v1", tags=["backup"])
    app.include_router(stats.router, prefix="/v1", tags=["stats"])

    return app


app = create_app()
