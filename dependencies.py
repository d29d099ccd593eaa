"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain functions used with
FastAPI's Depends() system.
"""

from __future__ import annotations

from fastapi import Request

from services.siteverify_service import SiteverifyService


def get_siteverify_service(request: Request) -> SiteverifyService:
    """Return the SiteverifyService holding the registered sites."""
    return request.app.state.siteverify_service
