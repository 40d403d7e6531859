"""Structured logging for Suricate.

This module configures structlog for JSON logging in production and
colored console output during development. Library code only calls
``get_logger``; configuring output is left to the embedding application
or the CLI.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from suricate.core.config import Settings, get_settings


def add_logger_name(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add logger name to log entry.

    Args:
        logger: Logger instance.
        method_name: Method name (unused).
        event_dict: Event dictionary to modify.

    Returns:
        EventDict: Modified event dictionary with logger name.
    """
    event_dict["logger"] = logger.name if hasattr(logger, "name") else "suricate"
    return event_dict


def rename_message_field(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Rename 'event' field to 'message' for compatibility."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


LIBRARY_LOGGER = "suricate"


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structured logging.

    Sets up structlog with console formatting for development and
    JSON formatting otherwise. Output goes to stderr through the
    ``suricate`` stdlib logger.

    Args:
        settings: Optional settings instance. If not provided, will load from environment.
    """
    if settings is None:
        settings = get_settings()

    shared_processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    level = getattr(logging, settings.log_level)

    if settings.is_development or settings.log_format == "console":
        renderer: Processor = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )
        cache = False
    else:
        shared_processors.append(rename_message_field)
        renderer = structlog.processors.JSONRenderer()
        cache = True

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=cache,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    library_logger = logging.getLogger(LIBRARY_LOGGER)
    library_logger.handlers = [handler]
    library_logger.setLevel(level)
    library_logger.propagate = False

    # httpx logs every request at INFO; keep it in line with our level
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    The logger wraps a stdlib logger, so until ``configure_logging`` runs
    records follow the stdlib defaults: nothing below WARNING is emitted
    and nothing is written to stdout.

    Args:
        name: Optional logger name. If not provided, uses 'suricate'.

    Returns:
        BoundLogger: Structured logger instance.
    """
    return structlog.wrap_logger(
        logging.getLogger(name or LIBRARY_LOGGER),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


class LoggingContext:
    """Context manager for adding logging context.

    Example:
        with LoggingContext(collection="users"):
            logger.info("Seeding")  # Will include collection
    """

    def __init__(self, **kwargs: Any) -> None:
        self.context = kwargs
        self.bound = False

    def __enter__(self) -> "LoggingContext":
        structlog.contextvars.bind_contextvars(**self.context)
        self.bound = True
        return self

    def __exit__(self, *args: Any) -> None:
        if self.bound:
            structlog.contextvars.unbind_contextvars(*self.context.keys())
            self.bound = False
