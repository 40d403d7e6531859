"""Error events passed to error observers.

Contains the transient notification objects used by the error observer:
- SchemaIssue: A single field-level validation problem
- ValidationErrorEvent: A payload failed its schema check
- InitializationErrorEvent: An operation ran before a connection existed
"""

from dataclasses import dataclass, field
from typing import Literal, Union


@dataclass(frozen=True, slots=True)
class SchemaIssue:
    """A single validation issue.

    Attributes:
        path: Location of the offending value (field name, then nested keys
            or list indexes).
        message: Human-readable error message.
        code: Machine-readable error code (pydantic error type).
    """

    path: tuple[str | int, ...]
    message: str
    code: str

    @property
    def field(self) -> str:
        """Dotted representation of the path, e.g. ``address.city``."""
        return ".".join(str(part) for part in self.path)

    def __str__(self) -> str:
        return f"{self.field}: {self.message}" if self.path else self.message


@dataclass(frozen=True, slots=True)
class ValidationErrorEvent:
    """Emitted when a payload fails validation against a collection schema."""

    message: str
    issues: tuple[SchemaIssue, ...] = field(default_factory=tuple)
    collection: str | None = None
    type: Literal["ValidationError"] = "ValidationError"


@dataclass(frozen=True, slots=True)
class InitializationErrorEvent:
    """Emitted when an operation is attempted before ``connect``."""

    message: str
    collection: str | None = None
    type: Literal["InitializationError"] = "InitializationError"


ErrorEvent = Union[ValidationErrorEvent, InitializationErrorEvent]
