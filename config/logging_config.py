"""
Logging configuration.

Usage:
    from config.logging_config import get_logger
    logger = get_logger(__name__)
"""

import logging
import sys

_configured = False

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger once per process."""
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a module logger, configuring logging from settings on first use."""
    if not _configured:
        from config.settings import settings
        setup_logging(settings.log_level)
    return logging.getLogger(name)
