"""Core Suricate utilities.

This module exports configuration, logging, exceptions and error observers.
"""

from suricate.core.config import Settings, get_settings
from suricate.core.exceptions import (
    AppServicesError,
    InitializationError,
    SuricateError,
    ValidationError,
)
from suricate.core.logging import LoggingContext, configure_logging, get_logger
from suricate.core.observers import (
    CallbackErrorObserver,
    ErrorObserver,
    LoggingErrorObserver,
    RaisingErrorObserver,
)

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "LoggingContext",
    "SuricateError",
    "InitializationError",
    "ValidationError",
    "AppServicesError",
    "ErrorObserver",
    "RaisingErrorObserver",
    "LoggingErrorObserver",
    "CallbackErrorObserver",
]
