"""
Stub siteverify endpoint.

POST /recaptcha/api/siteverify — form fields secret, response, remoteip.
Rules:
- Content-Type other than application/x-www-form-urlencoded → 400, no result body.
- Everything else → 200 with a VerificationResult JSON body, including
  failures. Callers must read "success", not the status code.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.formparsers import MultiPartException

from config import DEFAULT_VERIFY_PATH
from dependencies import get_siteverify_service
from errors import UnsupportedContentTypeError
from schemas.dto.requests.siteverify import SiteverifyRequest
from services.siteverify_service import SiteverifyService
from shared.logging import get_logger

log = get_logger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


async def siteverify(
    request: Request,
    service: SiteverifyService = Depends(get_siteverify_service),
) -> JSONResponse:
    content_type = request.headers.get("content-type", "")
    if content_type.split(";")[0].strip().lower() != FORM_CONTENT_TYPE:
        raise UnsupportedContentTypeError(
            f"expected {FORM_CONTENT_TYPE}", details={"content_type": content_type}
        )

    try:
        form = await request.form()
    except (MultiPartException, ValueError) as e:
        log.warning("stub_siteverify_bad_form", error=str(e))
        result = service.bad_request()
    else:
        result = service.verify(SiteverifyRequest.from_form(form))

    if not result.success:
        log.info("stub_siteverify_failed", error_codes=list(result.error_codes))
    return JSONResponse(status_code=200, content=result.to_payload())


def build_router(verify_path: str = DEFAULT_VERIFY_PATH) -> APIRouter:
    """Return a router serving the siteverify endpoint at *verify_path*."""
    router = APIRouter(tags=["siteverify"])
    router.add_api_route(verify_path, siteverify, methods=["POST"])
    return router
