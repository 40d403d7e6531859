"""Remote MongoDB handles backed by App Services function calls.

Each collection method maps to one service function. Arguments follow the
shape the App Services MongoDB service expects (``query``, ``project``,
``update``, ``arrayFilters``, ...); results are returned as decoded.
"""

from typing import Any

from suricate.domain.entities.options import (
    CountOptions,
    Filter,
    FindOneAndModifyOptions,
    FindOneOptions,
    FindOptions,
    Pipeline,
    Update,
    UpdateOptions,
)
from suricate.infrastructure.app_services.transport import AppServicesTransport

DEFAULT_SERVICE_NAME = "mongodb-atlas"


class RemoteCollection:
    """A named collection in a remote database."""

    def __init__(
        self,
        transport: AppServicesTransport,
        service_name: str,
        database_name: str,
        name: str,
    ) -> None:
        self._transport = transport
        self._service_name = service_name
        self._database_name = database_name
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def database_name(self) -> str:
        return self._database_name

    async def _call(self, function_name: str, **arguments: Any) -> Any:
        payload = {
            "database": self._database_name,
            "collection": self._name,
            **{key: value for key, value in arguments.items() if value is not None},
        }
        return await self._transport.call_function(
            function_name, [payload], service=self._service_name
        )

    async def count(self, filter: Filter | None = None, options: CountOptions | None = None) -> int:
        options = options or {}
        return await self._call("count", query=filter or {}, limit=options.get("limit"))

    async def find(self, filter: Filter | None = None, options: FindOptions | None = None) -> list[dict[str, Any]]:
        options = options or {}
        return await self._call(
            "find",
            query=filter or {},
            project=options.get("projection"),
            sort=options.get("sort"),
            limit=options.get("limit"),
        )

    async def find_one(
        self, filter: Filter | None = None, options: FindOneOptions | None = None
    ) -> dict[str, Any] | None:
        options = options or {}
        return await self._call(
            "findOne",
            query=filter or {},
            project=options.get("projection"),
            sort=options.get("sort"),
        )

    async def insert_one(self, document: dict[str, Any]) -> dict[str, Any]:
        return await self._call("insertOne", document=document)

    async def insert_many(self, documents: list[dict[str, Any]]) -> dict[str, Any]:
        return await self._call("insertMany", documents=documents)

    async def update_one(
        self, filter: Filter, update: Update, options: UpdateOptions | None = None
    ) -> dict[str, Any]:
        return await self._update("updateOne", filter, update, options)

    async def update_many(
        self, filter: Filter, update: Update, options: UpdateOptions | None = None
    ) -> dict[str, Any]:
        return await self._update("updateMany", filter, update, options)

    async def _update(
        self, function_name: str, filter: Filter, update: Update, options: UpdateOptions | None
    ) -> dict[str, Any]:
        options = options or {}
        return await self._call(
            function_name,
            query=filter,
            update=update,
            upsert=options.get("upsert"),
            arrayFilters=options.get("array_filters"),
        )

    async def delete_one(self, filter: Filter) -> dict[str, Any]:
        return await self._call("deleteOne", query=filter)

    async def delete_many(self, filter: Filter) -> dict[str, Any]:
        return await self._call("deleteMany", query=filter)

    async def find_one_and_update(
        self, filter: Filter, update: Update, options: FindOneAndModifyOptions | None = None
    ) -> dict[str, Any] | None:
        return await self._find_and_modify("findOneAndUpdate", filter, update, options)

    async def find_one_and_replace(
        self, filter: Filter, replacement: dict[str, Any], options: FindOneAndModifyOptions | None = None
    ) -> dict[str, Any] | None:
        return await self._find_and_modify("findOneAndReplace", filter, replacement, options)

    async def _find_and_modify(
        self,
        function_name: str,
        filter: Filter,
        update: dict[str, Any],
        options: FindOneAndModifyOptions | None,
    ) -> dict[str, Any] | None:
        options = options or {}
        return await self._call(
            function_name,
            filter=filter,
            update=update,
            sort=options.get("sort"),
            projection=options.get("projection"),
            upsert=options.get("upsert"),
            returnNewDocument=options.get("return_new_document"),
        )

    async def find_one_and_delete(
        self, filter: Filter | None = None, options: FindOneOptions | None = None
    ) -> dict[str, Any] | None:
        options = options or {}
        return await self._call(
            "findOneAndDelete",
            filter=filter or {},
            sort=options.get("sort"),
            projection=options.get("projection"),
        )

    async def aggregate(self, pipeline: Pipeline) -> list[dict[str, Any]]:
        return await self._call("aggregate", pipeline=pipeline)


class RemoteDatabase:
    """A remote database reached through an authenticated transport.

    Args:
        transport: Authenticated App Services transport.
        service_name: Name of the linked MongoDB data source.
        name: Database name.
    """

    def __init__(
        self,
        transport: AppServicesTransport,
        service_name: str,
        name: str,
    ) -> None:
        self._transport = transport
        self._service_name = service_name
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def transport(self) -> AppServicesTransport:
        return self._transport

    def collection(self, name: str) -> RemoteCollection:
        return RemoteCollection(self._transport, self._service_name, self._name, name)

    def __repr__(self) -> str:
        return f"RemoteDatabase(name={self._name!r}, service={self._service_name!r})"
