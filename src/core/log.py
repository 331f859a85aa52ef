"""Structured logging for the server.

stdout carries the MCP stdio protocol, so every log line goes to stderr.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def configure_logging(level: str = "info") -> None:
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_LEVELS.get(level, logging.INFO)),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(component: str) -> Any:
    """Get a lazy logger bound to a component name.

    Resolution is deferred to the first log call, so module-level loggers pick
    up the configuration installed later by `configure_logging`.
    """
    return structlog.get_logger(component=component)
