"""
Unit test configuration.

Keeps pydantic-settings from reading a developer's .env file so the
settings tests only see what they set through monkeypatch.setenv().
"""

import pytest


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})
