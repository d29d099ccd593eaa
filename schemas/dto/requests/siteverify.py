"""
Request DTO for the siteverify endpoint.

SiteverifyRequest — form body of POST /recaptcha/api/siteverify

Fields default to empty strings; an empty value means "not supplied".
"""

from __future__ import annotations

from typing import Mapping

from pydantic import BaseModel, ConfigDict


class SiteverifyRequest(BaseModel):
    """Form fields sent to the verification endpoint."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    secret: str = ""
    response: str = ""
    remoteip: str = ""

    def to_form(self) -> dict[str, str]:
        """Return the form fields to post; ``remoteip`` only when non-empty."""
        form = {"secret": self.secret, "response": self.response}
        if self.remoteip:
            form["remoteip"] = self.remoteip
        return form

    @classmethod
    def from_form(cls, form: Mapping[str, object]) -> "SiteverifyRequest":
        """Build from a parsed form, ignoring non-string (file) values."""
        values = {}
        for name in ("secret", "response", "remoteip"):
            value = form.get(name)
            if isinstance(value, str):
                values[name] = value
        return cls(**values)
