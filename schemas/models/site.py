"""
In-memory models held by the stub verification server.

Site        — one registered reCAPTCHA site: key pair plus its issued tokens.
TokenRecord — state of one issued response token.

A TokenRecord goes from used=False to used=True at most once, and only when
a verification request finds it in its site's table. The site's lock must be
held while reading or changing a record.
"""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from shared.generators import (
    generate_response_token,
    generate_site_key,
    generate_unique,
)


DEFAULT_TOKEN_TTL_SECONDS = 120


class TokenRecord(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    used: bool = False
    # Empty means unbound: any caller IP is accepted
    remote_ip: str = ""
    expires_at: datetime
    action: Optional[str] = None
    score: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    def accepts_ip(self, remote_ip: str) -> bool:
        """True unless *remote_ip* was supplied and differs from the bound IP."""
        if not remote_ip or not self.remote_ip:
            return True
        return remote_ip == self.remote_ip


class Site(BaseModel):
    """A registered site and the tokens issued for it."""

    public_key: str
    private_key: str
    hostname: str = "localhost"
    token_ttl_seconds: int = Field(default=DEFAULT_TOKEN_TTL_SECONDS, gt=0)
    tokens: dict[str, TokenRecord] = Field(default_factory=dict)

    _lock: threading.Lock = PrivateAttr(default_factory=threading.Lock)

    @classmethod
    def create(
        cls,
        hostname: str = "localhost",
        token_ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS,
    ) -> "Site":
        """Build a site with a freshly generated key pair and no tokens."""
        public_key = generate_site_key()
        private_key = generate_unique(generate_site_key, {public_key})
        return cls(
            public_key=public_key,
            private_key=private_key,
            hostname=hostname,
            token_ttl_seconds=token_ttl_seconds,
        )

    @property
    def lock(self) -> threading.Lock:
        return self._lock

    def issue_token(
        self,
        remote_ip: str = "",
        expires_at: Optional[datetime] = None,
        *,
        action: Optional[str] = None,
        score: Optional[float] = None,
    ) -> str:
        """Simulate a solved challenge and return its response token.

        Args:
            remote_ip: Address the token is bound to; empty leaves it unbound.
            expires_at: When the token stops verifying. Defaults to now plus
                the site's token TTL. Naive datetimes are taken as UTC.
            action: Action name reported back on success (score-based sites).
            score: Risk score reported back on success (score-based sites).
        """
        if expires_at is None:
            expires_at = datetime.now(timezone.utc) + timedelta(
                seconds=self.token_ttl_seconds
            )
        elif expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)

        record = TokenRecord(
            remote_ip=remote_ip,
            expires_at=expires_at,
            action=action,
            score=score,
        )
        with self._lock:
            token = generate_unique(generate_response_token, self.tokens)
            self.tokens[token] = record
        return token

    def get_token(self, token: str) -> Optional[TokenRecord]:
        """Return the record for *token*, or None if it was never issued here."""
        with self._lock:
            return self.tokens.get(token)
