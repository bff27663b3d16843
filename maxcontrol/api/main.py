"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from maxcontrol.api.middleware import RequestIDMiddleware, MetricsMiddleware
from maxcontrol.api.v1 import quotes, payables
from maxcontrol.infrastructure.observability.logging import setup_logging
from maxcontrol.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="MaxControl API",
        description="Quote pricing and accounts payable service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
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
    app.include_router(quotes.router, prefix="/v1", tags=["quotes"])
    app.include_router(payables.router, prefix="/v1", tags=["payables"])

    return app


app = create_app()
