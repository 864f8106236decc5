"""
Logging configuration using structlog for structured logging.

This module provides centralized logging setup for Quolar. Logs are written
to stderr so command output on stdout (reports, JSON) stays clean.
"""

import logging
import sys
from typing import Any, Literal

import structlog

LogFormat = Literal["json", "console"]


def configure_logging(log_level: str = "INFO", log_format: LogFormat = "json") -> None:
    """Configure structured logging.

    Sets up structlog with a pipeline of processors that add timestamps, log
    levels, stack traces and contextual values bound through
    ``structlog.contextvars`` (the workflow binds ``ticket_id``).

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: ``json`` for machine-readable lines, ``console`` for
            human-readable colored output
    """
    renderer: Any
    if log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, log_level.upper(), logging.INFO)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a logger instance.

    Args:
        name: Optional logger name (typically __name__ from calling module)

    Example:
        >>> log = get_logger(__name__)
        >>> log.info("step_started", step="analyze_ticket")
    """
    return structlog.get_logger(name)
