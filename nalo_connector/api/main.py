"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from nalo_connector.api.middleware import RequestIDMiddleware, MetricsMiddleware
from nalo_connector.api.v1 import accounts, bills, sync
from nalo_connector.infrastructure.database.session import init_db
from nalo_connector.infrastructure.observability.logging import setup_logging
from nalo_connector.config import export_error_reporting, settings

setup_logging(settings.log_level, settings.service_name)
export_error_reporting(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    """Create the connector service: sync trigger plus read access to imported data"""
    app = FastAPI(
        title="Nalo Connector",
        description="Imports Nalo documents, bills, accounts and balances into a personal data store",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Last added runs first: request ID is set before metrics are timed
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(sync.router, prefix="/v1", tags=["sync"])
    app.include_router(accounts.router, prefix="/v1", tags=["accounts"])
    app.include_router(bills.router, prefix="/v1", tags=["bills"])

    return app


app = create_app()
