"""reCAPTCHA implementation of CaptchaProvider.

- one POST per verification, no retries and no caching
- transport and protocol failures raise; verification failures return False
- verify_url can point at a RecaptchaStubServer or an alternate deployment
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
import pydantic

from config import RecaptchaSettings
from errors import CaptchaResponseError, CaptchaTransportError
from infrastructure.http_client import HttpClient
from schemas.dto.requests.siteverify import SiteverifyRequest
from schemas.dto.responses.siteverify import VerificationResult
from shared.logging import get_logger, hash_ip

log = get_logger(__name__)


class RecaptchaProvider:
    def __init__(
        self,
        secret: str,
        http_client: Optional[HttpClient] = None,
        verify_url: Optional[str] = None,
        settings: Optional[RecaptchaSettings] = None,
    ) -> None:
        if settings is None:
            settings = RecaptchaSettings()
        self.secret = secret
        self.verify_url = verify_url or settings.verify_url
        self._owns_http = http_client is None
        self._http = http_client or HttpClient(timeout=settings.timeout_seconds)

    async def check(self, token: str, remote_ip: str = "") -> VerificationResult:
        """Verify *token* and return the full decoded result.

        Raises:
            CaptchaTransportError: the endpoint could not be reached.
            CaptchaResponseError: the reply was not a 200 JSON verification result.
        """
        form = SiteverifyRequest(
            secret=self.secret, response=token, remoteip=remote_ip
        ).to_form()
        try:
            response = await self._http.post_form(self.verify_url, form)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            log.error(
                "recaptcha_request_failed", error=str(e), error_type=type(e).__name__
            )
            raise CaptchaTransportError(
                "reCAPTCHA verify endpoint unreachable",
                details={"error_type": type(e).__name__},
            ) from e

        if response.status_code != 200:
            log.error(
                "recaptcha_api_error",
                status_code=response.status_code,
                response_text=response.text[:200],
            )
            raise CaptchaResponseError(
                "reCAPTCHA verify endpoint returned an error status",
                details={"status_code": response.status_code},
            )

        try:
            result = VerificationResult.model_validate_json(response.content)
        except pydantic.ValidationError as e:
            log.error("recaptcha_invalid_response", response_text=response.text[:200])
            raise CaptchaResponseError(
                "reCAPTCHA verify endpoint returned an unreadable body"
            ) from e

        if not result.success:
            log.warning(
                "recaptcha_verification_failed",
                error_codes=list(result.error_codes),
                remote_ip=hash_ip(remote_ip),
            )
        return result

    async def verify(self, token: str) -> bool:
        result = await self.check(token)
        return result.success

    async def verify_remote_ip(self, remote_ip: str, token: str) -> bool:
        result = await self.check(token, remote_ip=remote_ip)
        return result.success

    async def aclose(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "RecaptchaProvider":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
