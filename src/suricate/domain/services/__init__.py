"""Domain services: schema validation and timestamp merging."""

from suricate.domain.services.schema_validator import Schema, SchemaResult
from suricate.domain.services.timestamp_service import (
    MixedUpdateError,
    Timestamper,
    split_update,
    to_iso,
    utc_now,
)

__all__ = [
    "Schema",
    "SchemaResult",
    "Timestamper",
    "MixedUpdateError",
    "split_update",
    "to_iso",
    "utc_now",
]
