"""
Structured logging for depot using structlog.

Log lines go to stderr so tools printing URLs on stdout stay pipeable.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from depot.core.config import Settings, get_settings

# Libraries that log every request at DEBUG/INFO
QUIET_LOGGERS = ("botocore", "boto3", "urllib3", "s3transfer")


def _build_processors(settings: Settings) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=settings.is_development))
    return processors


def configure_logging(settings: Settings | None = None) -> None:
    """
    Route depot's structured logs to stderr.

    Args:
        settings: Application settings. If None, uses default settings.
    """
    if settings is None:
        settings = get_settings()

    level = logging.getLevelName(settings.log_level)

    structlog.configure(
        processors=_build_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level, force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str | None = None, **initial: Any) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger, optionally bound to initial context.

    Args:
        name: Logger name, usually the module's __name__.
        **initial: Key/value pairs included in every event from this logger.
    """
    # Stays lazy: configuration is resolved on first use, not at import
    return structlog.get_logger(name, **initial)
