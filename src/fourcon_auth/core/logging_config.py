"""Logging setup for the service."""
from __future__ import annotations

import logging

from fourcon_auth.core.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure the root ``fourcon_auth`` logger once per process."""
    resolved = (level or settings.log_level).upper()
    if settings.debug:
        resolved = "DEBUG"

    logger = logging.getLogger("fourcon_auth")
    logger.setLevel(resolved)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
