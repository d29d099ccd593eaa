"""Shared async HTTP client with configurable timeout."""

from typing import Any

import httpx


class HttpClient:
    """Thin async wrapper around httpx.AsyncClient with a configurable timeout.

    Safe to share between concurrent verifications; it holds no per-call state.
    """

    def __init__(self, timeout: float = 5.0) -> None:
        self._client = httpx.AsyncClient(timeout=timeout)

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def post_form(self, url: str, form: dict[str, str], **kwargs: Any) -> httpx.Response:
        """POST *form* url-encoded; httpx sets the form Content-Type header."""
        headers = {"Content-Type": "application/x-www-form-urlencoded"}
        headers.update(kwargs.pop("headers", {}))
        return await self._client.post(url, data=form, headers=headers, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
