"""Centralized logging configuration for the application."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def setup_logging(level: str = "WARNING") -> None:
    """Configure the budgetwise and SQLAlchemy engine loggers to write to stderr.

    Calling it again replaces the handlers instead of stacking new ones.
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    app_logger = logging.getLogger("budgetwise")
    app_logger.setLevel(log_level)
    app_logger.handlers = [handler]
    app_logger.propagate = False

    # SQL echo stays off unless explicitly debugging
    engine_logger = logging.getLogger("sqlalchemy.engine")
    engine_logger.setLevel(logging.INFO if log_level <= logging.DEBUG else logging.WARNING)
    engine_logger.handlers = [handler]
    engine_logger.propagate = False


__all__ = ["setup_logging", "LOG_LEVELS"]
