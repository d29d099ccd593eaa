"""
Configuration via pydantic-settings.

Every field has a default, so nothing is required from the environment.
Values may be overridden with prefixed environment variables or by passing
keyword arguments directly, which always win.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"
DEFAULT_VERIFY_PATH = "/recaptcha/api/siteverify"


class RecaptchaSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="RECAPTCHA_", env_file=".env", extra="ignore"
    )

    verify_url: str = DEFAULT_VERIFY_URL
    timeout_seconds: float = Field(default=5.0, gt=0)


class StubServerSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="RECAPTCHA_STUB_", env_file=".env", extra="ignore"
    )

    host: str = "127.0.0.1"
    verify_path: str = DEFAULT_VERIFY_PATH
    # Lifetime of an issued token when no explicit expiry is given
    token_ttl_seconds: int = Field(default=120, gt=0)
    startup_timeout_seconds: float = Field(default=5.0, gt=0)
    # uvicorn's own log level; request logs are noise in test output
    log_level: str = "warning"


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production

    @property
    def is_json(self) -> bool:
        return self.log_format == "json"
