"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from paywise_gateway.api.errors import register_exception_handlers
from paywise_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from paywise_gateway.api.v1 import clients, payments, dashboard
from paywise_gateway.infrastructure.database.session import init_db
from paywise_gateway.infrastructure.observability.logging import setup_logging
from paywise_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)

logger = logging.getLogger(__name__)


def provider_modes() -> dict:
    """Which collaborators are live; the rest only log what they would send"""
    return {
        "sms": "live" if settings.sms_configured else "mock",
        "email": "live" if settings.email_configured else "mock",
        "payment_gateway": "live" if settings.payment_gateway_configured else "mock",
        "ai": "live" if settings.ai_configured else "mock",
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the store at startup; it lives as long as the process"""
    init_db()
    logger.info("Starting service", extra={"providers": provider_modes()})
    yield
    logger.info("Shutting down service")


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="PayWise Gateway",
        description="Client records, payment requests and AI risk insights",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name, "providers": provider_modes()}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(clients.router, prefix="/v1", tags=["clients"])
    app.include_router(payments.router, prefix="/v1", tags=["payments"])
    app.include_router(dashboard.router, prefix="/v1", tags=["dashboard"])

    return app


app = create_app()
