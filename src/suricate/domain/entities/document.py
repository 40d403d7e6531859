"""Timestamp field names stamped on every stored document."""

from typing import Any

CREATED_AT = "createdAt"
UPDATED_AT = "updatedAt"

TIMESTAMP_FIELDS = frozenset({CREATED_AT, UPDATED_AT})


def is_reserved_path(path: str, fields: frozenset[str] = TIMESTAMP_FIELDS) -> bool:
    """Whether a field path (``createdAt`` or ``createdAt.x``) is rooted at a reserved field."""
    return path.split(".", 1)[0] in fields


def strip_reserved(payload: dict[str, Any], fields: frozenset[str] = TIMESTAMP_FIELDS) -> dict[str, Any]:
    """Return a copy of ``payload`` without keys rooted at the given reserved fields."""
    return {key: value for key, value in payload.items() if not is_reserved_path(key, fields)}
