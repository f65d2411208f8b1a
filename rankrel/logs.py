"""Structured logging configuration for the Ranking Reliability Engine.

Logging is done with ``structlog`` on top of the standard library. Output
is either JSON (for machines) or a console format (for humans) and always
goes to stderr, so stdout stays reserved for CLI tables.

Typical usage
- Call ``configure_logging(log_level, log_format)`` once at startup
- Acquire loggers via ``get_logger(__name__)``

Until ``configure_logging`` runs, events go through the standard library
logger hierarchy (so nothing is printed to stdout) and are subject to
whatever handlers the host application installed.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import LoggerFactory, add_logger_name

PACKAGE_LOGGER = "rankrel"
LOG_FORMATS = ("console", "json")


def configure_logging(
    log_level: str = "WARNING",
    log_format: str = "console",
    service_name: str = "rankrel",
    **kwargs: Any
) -> None:
    """Configure structured logging for the engine.

    Parameters
    - log_level: ``DEBUG``, ``INFO``, ``WARNING``, ``ERROR`` (case-insensitive)
    - log_format: ``json`` or ``console``
    - service_name: Bound to every log line
    - kwargs: Extra context bound to every log line
    """
    level = getattr(logging, log_level.upper())

    # Only the package logger is touched; the host application's root
    # logger is left alone.
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = False

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_logger_name,
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=service_name, **kwargs)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def _install_default_logging() -> None:
    """Send events through the stdlib logger hierarchy until ``configure_logging`` runs."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            add_logger_name,
            structlog.processors.KeyValueRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=False,
    )


if not structlog.is_configured():
    _install_default_logging()
