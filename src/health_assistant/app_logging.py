"""Logging configuration helpers."""

import logging

APP_LOGGER = "health_assistant"


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure the application logger once and return it."""
    logger = logging.getLogger(APP_LOGGER)
    logger.setLevel(level)
    if logger.handlers:
        return logger
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
