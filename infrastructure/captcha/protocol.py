"""CaptchaProvider protocol — callers depend on this, not the concrete implementation."""

from typing import Protocol


class CaptchaProvider(Protocol):
    async def verify(self, token: str) -> bool: ...

    async def verify_remote_ip(self, remote_ip: str, token: str) -> bool: ...
