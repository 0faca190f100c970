# main.py

"""FastAPI application exposing order totals and invoice rendering."""

from __future__ import annotations

from fastapi import FastAPI

from config import get_settings

from .middlewares import LoggingMiddleware, RequestIdMiddleware
from .obs import configure_logging, init_sentry
from .routes_invoice import router as invoice_router
from .routes_metrics import router as metrics_router


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    init_sentry(settings.error_dsn, settings.environment)

    app = FastAPI(title="Storefront invoicing")
    # Added last runs first: the request id must exist before logging.
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.include_router(invoice_router)
    app.include_router(metrics_router)

    @app.get("/health")
    async def health() -> dict:
        return {"ok": True}

    return app


app = create_app()
