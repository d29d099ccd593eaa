"""
Error hierarchy and FastAPI exception handlers.

AppError is the base for all typed errors. Verification-domain outcomes
(bad token, wrong secret, IP mismatch) are never raised; they travel inside
a VerificationResult. Only transport/protocol problems and stub-server
misuse become exceptions.

register_error_handlers() is used by the stub verification server so that
structural request errors become 4xx JSON bodies and anything unexpected
becomes a 500.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class AppError(Exception):
    """Base error. All typed errors inherit from this."""

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.details = details

    def to_dict(self) -> dict:
        payload: dict = {"error": self.message, "code": self.error_code}
        if self.field is not None:
            payload["field"] = self.field
        if self.details is not None:
            payload["details"] = self.details
        return payload


class CaptchaTransportError(AppError):
    """The verification endpoint could not be reached."""

    status_code = 502
    error_code = "captcha_unreachable"


class CaptchaResponseError(AppError):
    """The verification endpoint answered with something that is not a result."""

    status_code = 502
    error_code = "captcha_bad_response"


class UnsupportedContentTypeError(AppError):
    status_code = 400
    error_code = "unsupported_content_type"


class KeyGenerationError(AppError):
    status_code = 500
    error_code = "key_generation_failed"


class ServerNotRunningError(AppError):
    status_code = 500
    error_code = "server_not_running"


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        return JSONResponse(
            status_code=500,
            content={"error": "An internal server error occurred.", "code": "internal_error"},
        )
