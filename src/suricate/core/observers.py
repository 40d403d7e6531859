"""Error observers notified on validation and initialization failures.

An observer is injected when the client is constructed and handed to every
collection facade. It is a notification hook only: after the observer
returns, the facade still aborts the operation by raising.

Example:
    class Collector(ErrorObserver):
        def __init__(self):
            self.events = []

        def on_error(self, event):
            self.events.append(event)

    client = Suricate(error_observer=Collector())
"""

from abc import ABC, abstractmethod
from typing import Callable

from suricate.core.exceptions import InitializationError, ValidationError
from suricate.core.logging import get_logger
from suricate.domain.entities.error_event import (
    ErrorEvent,
    InitializationErrorEvent,
    ValidationErrorEvent,
)

logger = get_logger(__name__)


class ErrorObserver(ABC):
    """Strategy interface for observing facade failures."""

    @abstractmethod
    def on_error(self, event: ErrorEvent) -> None:
        """Handle an error event.

        Implementations may raise to replace the default exception, or
        return to let the facade raise its own.
        """
        ...


class RaisingErrorObserver(ErrorObserver):
    """Default observer: raise the matching Suricate exception immediately."""

    def on_error(self, event: ErrorEvent) -> None:
        if isinstance(event, ValidationErrorEvent):
            raise ValidationError(event.message, event.issues)
        raise InitializationError(event.message)


class LoggingErrorObserver(ErrorObserver):
    """Log the event and return, leaving the facade to raise."""

    def on_error(self, event: ErrorEvent) -> None:
        if isinstance(event, ValidationErrorEvent):
            logger.warning(
                "Validation failed",
                collection=event.collection,
                error=event.message,
                fields=[issue.field for issue in event.issues],
            )
        elif isinstance(event, InitializationErrorEvent):
            logger.error(
                "Database not initialized",
                collection=event.collection,
                error=event.message,
            )


class CallbackErrorObserver(ErrorObserver):
    """Adapt a plain callable to the observer interface.

    Args:
        callback: Called with the event. Its return value is ignored.
    """

    def __init__(self, callback: Callable[[ErrorEvent], object]) -> None:
        self._callback = callback

    def on_error(self, event: ErrorEvent) -> None:
        self._callback(event)
