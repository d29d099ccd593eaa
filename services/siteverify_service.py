"""
Site registry and token verification state machine for the stub server.

SiteverifyService owns every registered Site. verify() runs the same checks
the real siteverify endpoint performs, in the same order, and always
returns a VerificationResult. Domain failures are never raised.

Site lookup by private key is a linear scan; the stub only ever holds a
handful of sites.
"""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Optional

from schemas.dto.requests.siteverify import SiteverifyRequest
from schemas.dto.responses.siteverify import (
    BAD_REQUEST,
    INVALID_INPUT_RESPONSE,
    INVALID_INPUT_SECRET,
    MISSING_INPUT_RESPONSE,
    MISSING_INPUT_SECRET,
    TIMEOUT_OR_DUPLICATE,
    VerificationResult,
)
from schemas.models.site import DEFAULT_TOKEN_TTL_SECONDS, Site
from shared.logging import get_logger, hash_ip

log = get_logger(__name__)


class SiteverifyService:
    def __init__(self, token_ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS) -> None:
        self._token_ttl_seconds = token_ttl_seconds
        self._sites: list[Site] = []
        self._lock = threading.Lock()

    # ── Site registry ────────────────────────────────────────────────────────

    def register_site(self, hostname: str = "localhost") -> Site:
        """Create a site with fresh keys and an empty token table."""
        site = Site.create(hostname=hostname, token_ttl_seconds=self._token_ttl_seconds)
        with self._lock:
            self._sites.append(site)
        log.info("stub_site_registered", hostname=hostname)
        return site

    def discard_site(self, site: Site) -> bool:
        """Forget *site*; its tokens stop verifying. Returns False if unknown."""
        with self._lock:
            for index, registered in enumerate(self._sites):
                if registered is site:
                    del self._sites[index]
                    log.info("stub_site_discarded", hostname=site.hostname)
                    return True
        return False

    @property
    def sites(self) -> tuple[Site, ...]:
        with self._lock:
            return tuple(self._sites)

    def get_site_by_public_key(self, public_key: str) -> Optional[Site]:
        with self._lock:
            for site in self._sites:
                if site.public_key == public_key:
                    return site
        return None

    def get_site_by_private_key(self, private_key: str) -> Optional[Site]:
        with self._lock:
            for site in self._sites:
                if site.private_key == private_key:
                    return site
        return None

    # ── Verification ─────────────────────────────────────────────────────────

    def bad_request(self) -> VerificationResult:
        """Result for a body that could not be parsed as a form."""
        return VerificationResult.failure(BAD_REQUEST, challenge_ts=_now())

    def verify(
        self, request: SiteverifyRequest, now: Optional[datetime] = None
    ) -> VerificationResult:
        """Check a response token against the registered sites.

        A token that is found and neither used nor expired is consumed even
        when the remote IP then turns out not to match.
        """
        if now is None:
            now = _now()
        elif now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        if not request.secret:
            return VerificationResult.failure(MISSING_INPUT_SECRET, challenge_ts=now)

        site = self.get_site_by_private_key(request.secret)
        if site is None:
            return VerificationResult.failure(INVALID_INPUT_SECRET, challenge_ts=now)

        if not request.response:
            return VerificationResult.failure(
                MISSING_INPUT_RESPONSE, challenge_ts=now, hostname=site.hostname
            )

        with site.lock:
            record = site.tokens.get(request.response)
            if record is None:
                return VerificationResult.failure(
                    INVALID_INPUT_RESPONSE, challenge_ts=now, hostname=site.hostname
                )

            if record.used or record.is_expired(now):
                log.info(
                    "stub_token_rejected",
                    used=record.used,
                    expired=record.is_expired(now),
                )
                return VerificationResult.failure(
                    TIMEOUT_OR_DUPLICATE, challenge_ts=now, hostname=site.hostname
                )

            record.used = True

        if not record.accepts_ip(request.remoteip):
            log.info(
                "stub_token_ip_mismatch",
                remote_ip=hash_ip(request.remoteip),
                bound_ip=hash_ip(record.remote_ip),
            )
            return VerificationResult(
                success=False, challenge_ts=now, hostname=site.hostname
            )

        return VerificationResult(
            success=True,
            score=record.score,
            action=record.action,
            challenge_ts=now,
            hostname=site.hostname,
        )


def _now() -> datetime:
    return datetime.now(timezone.utc)
