"""
Response DTO for the siteverify endpoint.

VerificationResult — JSON body returned by POST /recaptcha/api/siteverify,
                     both by the real service and by the stub server.

The hyphenated ``error-codes`` key is exposed as ``error_codes``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


BAD_REQUEST = "bad-request"
MISSING_INPUT_SECRET = "missing-input-secret"
INVALID_INPUT_SECRET = "invalid-input-secret"
MISSING_INPUT_RESPONSE = "missing-input-response"
INVALID_INPUT_RESPONSE = "invalid-input-response"
TIMEOUT_OR_DUPLICATE = "timeout-or-duplicate"


class VerificationResult(BaseModel):
    """Outcome of a single token verification. Immutable once built."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    success: bool
    # score and action are only sent by score-based (v3) sites
    score: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    action: Optional[str] = None
    challenge_ts: Optional[datetime] = None
    hostname: str = ""
    error_codes: tuple[str, ...] = Field(default=(), alias="error-codes")

    @field_validator("error_codes", mode="before")
    @classmethod
    def _null_error_codes(cls, v: Any) -> Any:
        # Go services encode an empty slice as null
        return () if v is None else v

    @field_validator("hostname", mode="before")
    @classmethod
    def _null_hostname(cls, v: Any) -> Any:
        return "" if v is None else v

    def to_payload(self) -> dict:
        """Return the wire JSON dict, omitting unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def failure(cls, *error_codes: str, **fields) -> "VerificationResult":
        """Build an unsuccessful result carrying *error_codes*."""
        return cls(success=False, error_codes=error_codes, **fields)
