"""Logger setup shared by the simulation thread, consumers and entry points."""

import logging

LOGGER_NAME = "sphstream"


def configure_logging(level="INFO") -> logging.Logger:
    """Attach a console handler to the package logger and set its level.

    Args:
        level: Level name ('DEBUG', 'INFO', ...) or numeric level

    Returns:
        The configured ``sphstream`` logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s | %(threadName)s | %(message)s"))
        logger.addHandler(handler)
    return logger
