"""Domain entities.

Plain data structures shared by the domain services and the
infrastructure layer.
"""

from suricate.domain.entities.connection import ConnectionConfig
from suricate.domain.entities.document import CREATED_AT, TIMESTAMP_FIELDS, UPDATED_AT
from suricate.domain.entities.error_event import (
    ErrorEvent,
    InitializationErrorEvent,
    SchemaIssue,
    ValidationErrorEvent,
)

__all__ = [
    "ConnectionConfig",
    "CREATED_AT",
    "UPDATED_AT",
    "TIMESTAMP_FIELDS",
    "ErrorEvent",
    "InitializationErrorEvent",
    "SchemaIssue",
    "ValidationErrorEvent",
]
