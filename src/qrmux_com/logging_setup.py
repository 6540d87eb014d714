"""Logging configuration setup."""

import logging


def setup_logging(level: str = "WARNING") -> logging.Logger:
    log_level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    return logging.getLogger("qrmux")
