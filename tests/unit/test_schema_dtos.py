"""Unit tests for the siteverify request/response DTOs."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from schemas.dto.requests.siteverify import SiteverifyRequest
from schemas.dto.responses.siteverify import (
    INVALID_INPUT_SECRET,
    TIMEOUT_OR_DUPLICATE,
    VerificationResult,
)


# ── SiteverifyRequest ─────────────────────────────────────────────────────────


class TestSiteverifyRequest:
    def test_form_without_remote_ip(self):
        req = SiteverifyRequest(secret="s", response="r")
        assert req.to_form() == {"secret": "s", "response": "r"}

    def test_form_with_remote_ip(self):
        req = SiteverifyRequest(secret="s", response="r", remoteip="1.2.3.4")
        assert req.to_form() == {"secret": "s", "response": "r", "remoteip": "1.2.3.4"}

    def test_from_form_defaults_missing_fields(self):
        req = SiteverifyRequest.from_form({"response": "r"})
        assert req.secret == ""
        assert req.response == "r"
        assert req.remoteip == ""

    def test_from_form_ignores_non_string_values(self):
        req = SiteverifyRequest.from_form({"secret": object(), "response": "r"})
        assert req.secret == ""


# ── VerificationResult ────────────────────────────────────────────────────────


class TestVerificationResult:
    def test_decodes_google_payload(self):
        raw = (
            '{"success": true, "challenge_ts": "2024-05-01T12:00:00Z",'
            ' "hostname": "example.com", "score": 0.9, "action": "login"}'
        )
        result = VerificationResult.model_validate_json(raw)
        assert result.success is True
        assert result.hostname == "example.com"
        assert result.score == 0.9
        assert result.action == "login"
        assert result.challenge_ts == datetime(2024, 5, 1, 12, tzinfo=timezone.utc)
        assert result.error_codes == ()

    def test_decodes_hyphenated_error_codes(self):
        raw = '{"success": false, "error-codes": ["invalid-input-secret"]}'
        result = VerificationResult.model_validate_json(raw)
        assert result.success is False
        assert result.error_codes == (INVALID_INPUT_SECRET,)

    def test_null_error_codes_and_hostname_decode_as_empty(self):
        result = VerificationResult.model_validate_json(
            '{"success": true, "error-codes": null, "hostname": null}'
        )
        assert result.success is True
        assert result.error_codes == ()
        assert result.hostname == ""

    def test_ignores_unknown_keys(self):
        result = VerificationResult.model_validate_json('{"success": true, "apk_package_name": "x"}')
        assert result.success is True

    def test_success_is_required(self):
        with pytest.raises(ValidationError):
            VerificationResult.model_validate_json('{"hostname": "x"}')

    def test_score_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            VerificationResult(success=True, score=1.5)

    def test_is_frozen(self):
        result = VerificationResult(success=True)
        with pytest.raises(ValidationError):
            result.success = False

    def test_failure_helper(self):
        result = VerificationResult.failure(TIMEOUT_OR_DUPLICATE, hostname="h")
        assert result.success is False
        assert result.error_codes == (TIMEOUT_OR_DUPLICATE,)
        assert result.hostname == "h"

    def test_payload_uses_wire_keys(self):
        ts = datetime(2024, 5, 1, 12, tzinfo=timezone.utc)
        payload = VerificationResult.failure(
            INVALID_INPUT_SECRET, challenge_ts=ts
        ).to_payload()
        assert payload["success"] is False
        assert payload["error-codes"] == ["invalid-input-secret"]
        assert payload["challenge_ts"].startswith("2024-05-01T12:00:00")
        assert "score" not in payload
        assert "action" not in payload
