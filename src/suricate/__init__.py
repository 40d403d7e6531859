"""Suricate - typed MongoDB collections with timestamps and validation.

A thin asynchronous facade over MongoDB Atlas App Services that stamps
``createdAt`` / ``updatedAt`` on writes and validates documents against a
declared schema before they reach the database.
"""

__version__ = "0.1.0"

from suricate.client import Suricate
from suricate.core.exceptions import (
    AppServicesError,
    InitializationError,
    SuricateError,
    ValidationError,
)
from suricate.core.observers import (
    CallbackErrorObserver,
    ErrorObserver,
    LoggingErrorObserver,
    RaisingErrorObserver,
)
from suricate.domain.entities.connection import ConnectionConfig
from suricate.domain.entities.error_event import (
    InitializationErrorEvent,
    SchemaIssue,
    ValidationErrorEvent,
)
from suricate.domain.field_types import (
    NonEmptyStr,
    NonNegativeInt,
    ObjectIdField,
    OptionalObjectId,
)
from suricate.domain.services.schema_validator import Schema
from suricate.infrastructure.persistence.scheme import Scheme

__all__ = [
    "__version__",
    "Suricate",
    "Scheme",
    "Schema",
    "ConnectionConfig",
    "ObjectIdField",
    "OptionalObjectId",
    "NonNegativeInt",
    "NonEmptyStr",
    "ErrorObserver",
    "RaisingErrorObserver",
    "LoggingErrorObserver",
    "CallbackErrorObserver",
    "ValidationErrorEvent",
    "InitializationErrorEvent",
    "SchemaIssue",
    "SuricateError",
    "InitializationError",
    "ValidationError",
    "AppServicesError",
]
