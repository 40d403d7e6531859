"""Reusable field types for collection schemas.

Plain Python types (``str``, ``int``, ``list[str]``, nested pydantic models)
work as field specs directly. This module adds the types that have no
builtin equivalent.

``ObjectIdField`` is required: a document without the field fails
validation. Use ``OptionalObjectId`` with a ``None`` default, e.g.
``(OptionalObjectId, None)``, for a reference that may be absent or null.

Example:
    schema = Schema({
        "owner": ObjectIdField,
        "parent": (OptionalObjectId, None),
        "age": NonNegativeInt,
    })
"""

from typing import Annotated, Any, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import Field, PlainValidator


def to_object_id(value: Any) -> ObjectId:
    """Coerce an ``ObjectId`` or its 24 character hex string to an ``ObjectId``.

    Raises:
        ValueError: If the value is neither, or the string is not valid hex.
    """
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str):
        try:
            return ObjectId(value)
        except InvalidId as e:
            raise ValueError(str(e)) from e
    raise ValueError(f"Expected ObjectId or hex string, got {type(value).__name__}")


ObjectIdField = Annotated[ObjectId, PlainValidator(to_object_id)]
OptionalObjectId = Optional[ObjectIdField]

NonNegativeInt = Annotated[int, Field(ge=0)]
NonEmptyStr = Annotated[str, Field(min_length=1)]
