"""
FastAPI application factory for the stub verification server.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from config import StubServerSettings
from errors import register_error_handlers
from routes.siteverify_routes import build_router
from services.siteverify_service import SiteverifyService


def create_app(
    service: Optional[SiteverifyService] = None,
    settings: Optional[StubServerSettings] = None,
) -> FastAPI:
    """Create a stub siteverify app backed by *service*."""
    if settings is None:
        settings = StubServerSettings()
    if service is None:
        service = SiteverifyService(token_ttl_seconds=settings.token_ttl_seconds)

    app = FastAPI(
        title="reCAPTCHA stub",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.siteverify_service = service

    register_error_handlers(app)
    app.include_router(build_router(settings.verify_path))

    return app
