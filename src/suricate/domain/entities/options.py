"""Option bundles accepted by collection operations.

Keys use Python naming; the driver translates them to the names expected
by the remote MongoDB service.
"""

from typing import Any, TypedDict

Filter = dict[str, Any]
Update = dict[str, Any]
Pipeline = list[dict[str, Any]]


class CountOptions(TypedDict, total=False):
    limit: int


class FindOneOptions(TypedDict, total=False):
    projection: dict[str, Any]
    sort: dict[str, int]


class FindOptions(FindOneOptions, total=False):
    limit: int


class UpdateOptions(TypedDict, total=False):
    upsert: bool
    array_filters: list[dict[str, Any]]


class FindOneAndModifyOptions(FindOneOptions, total=False):
    upsert: bool
    return_new_document: bool
