"""Logging configuration for the cipher breaking service."""

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure the application logger.

    Installs a single stderr handler on the ``app`` logger so repeated
    calls (tests, reloads) do not stack handlers.
    """
    logger = logging.getLogger("app")

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    return logger
