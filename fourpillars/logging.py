"""
structlog configuration.

Logs go to stderr so that stdout stays clean for the JSON printed by the CLI.
"""

import logging
import sys

import structlog


def setup_logging(level: str = "WARNING") -> None:
    """Configure structlog with ISO timestamps and a console renderer."""
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.WARNING)
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
