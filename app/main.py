"""
FastAPI application entry point.
Mounts routes, error handlers, tracing/logging middleware and Prometheus metrics.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import make_asgi_app

from app.api.errors import register_exception_handlers
from app.api.v1.router import api_router
from app.config import get_settings
from app.core.logging import RequestLoggingMiddleware, configure_logging
from app.core.tracing import TracingMiddleware
from app.db.session import engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: log the environment. Shutdown: release pooled DB connections."""
    logger.info("starting application in %s mode", get_settings().app_env)
    yield
    await engine.dispose()
    logger.info("server exiting")


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(
        title=settings.app_name,
        description="User management service: CRUD, filtering, pagination and lifecycle events.",
        version="1.0.0",
        lifespan=lifespan,
        debug=settings.debug and not settings.is_production,
    )

    register_exception_handlers(app)

    # Added last runs first: tracing wraps request logging so logs carry the trace id
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(TracingMiddleware)

    # Prometheus metrics at /metrics
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()
