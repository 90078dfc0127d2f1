"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from retailpro.api.middleware import RequestIDMiddleware, MetricsMiddleware
from retailpro.api.v1 import dashboard, invoices, products, stock
from retailpro.infrastructure.observability.logging import setup_logging
from retailpro.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="RetailPro",
        description="Billing, inventory and payment reminders for a retail counter",
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
    app.include_router(products.router, prefix="/v1", tags=["products"])
    app.include_router(stock.router, prefix="/v1", tags=["stock"])
    app.include_router(invoices.router, prefix="/v1", tags=["invoices"])
    app.include_router(dashboard.router, prefix="/v1", tags=["dashboard"])

    return app


app = create_app()
