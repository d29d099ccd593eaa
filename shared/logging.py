"""
Logger factory and re-exports of the logging configuration.

Example:
    >>> from shared.logging import get_logger
    >>> log = get_logger(__name__)
    >>> log.info("stub_site_registered", hostname="localhost")
"""

import structlog
from structlog.stdlib import BoundLogger

from shared.logging_config import (
    configure_structlog,
    hash_ip,
    setup_logging,
)

__all__ = [
    "get_logger",
    "hash_ip",
    "configure_structlog",
    "setup_logging",
]


def get_logger(name: str) -> BoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        structlog BoundLogger instance
    """
    return structlog.get_logger(name)
