"""
Random identifier generators for the stub verification server.

Both generators draw from the operating system's CSPRNG. Failure to obtain
randomness is surfaced as KeyGenerationError instead of escaping as a
low-level OSError.
"""

from __future__ import annotations

import secrets
import uuid
from typing import Callable, Container

from errors import KeyGenerationError

# Attempts before giving up on finding an identifier not already taken
MAX_GENERATION_ATTEMPTS = 8


def generate_site_key() -> str:
    """Generate a random UUID4 string used as a site public or private key."""
    try:
        return str(uuid.uuid4())
    except (NotImplementedError, OSError) as e:
        raise KeyGenerationError("could not generate site key") from e


def generate_response_token(length: int = 48) -> str:
    """Generate a URL-safe response token.

    Args:
        length: Number of random bytes before base64 encoding (default 48).
    """
    try:
        return secrets.token_urlsafe(length)
    except (NotImplementedError, OSError) as e:
        raise KeyGenerationError("could not generate response token") from e


def generate_unique(generate: Callable[[], str], taken: Container[str]) -> str:
    """Call *generate* until it returns a value not in *taken*.

    Raises:
        KeyGenerationError: when every attempt collided.
    """
    for _ in range(MAX_GENERATION_ATTEMPTS):
        candidate = generate()
        if candidate not in taken:
            return candidate
    raise KeyGenerationError(
        "could not generate a unique identifier",
        details={"attempts": MAX_GENERATION_ATTEMPTS},
    )
