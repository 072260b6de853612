"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from microlend_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from microlend_gateway.api.v1 import eligibility, loans, scores
from microlend_gateway.infrastructure.observability.logging import setup_logging
from microlend_gateway.config import settings


def create_app() -> FastAPI:
    """Build the app; request IDs are assigned before latency is measured"""
    setup_logging(settings.log_level)

    app = FastAPI(
        title="Microlend Gateway",
        description="Credit scoring, loan eligibility and risk service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(scores.router, prefix="/v1", tags=["scores"])
    app.include_router(eligibility.router, prefix="/v1", tags=["eligibility"])
    app.include_router(loans.router, prefix="/v1", tags=["loans"])

    return app


app = create_app()
