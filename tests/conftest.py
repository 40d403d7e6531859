"""Pytest configuration for all tests."""

import asyncio
import copy
from datetime import datetime, timedelta, timezone
from typing import Any, AsyncGenerator

import pytest
import pytest_asyncio
from bson import ObjectId

from suricate.client import Suricate
from suricate.core.config import Settings
from suricate.domain.entities.connection import ConnectionConfig
from suricate.infrastructure.app_services.authenticator import Authenticator


def _matches(document: dict[str, Any], filter: dict[str, Any] | None) -> bool:
    return all(document.get(key) == value for key, value in (filter or {}).items())


def _apply_update(document: dict[str, Any], update: dict[str, Any], inserting: bool) -> None:
    for key, value in update.get("$set", {}).items():
        document[key] = value
    for key, value in update.get("$inc", {}).items():
        document[key] = document.get(key, 0) + value
    for key in update.get("$unset", {}):
        document.pop(key, None)
    if inserting:
        for key, value in update.get("$setOnInsert", {}).items():
            document[key] = value


class InMemoryCollection:
    """Collection double that records calls and stores documents in a list."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.documents: list[dict[str, Any]] = []
        self.calls: list[tuple[Any, ...]] = []

    def _first(self, filter: dict[str, Any] | None) -> dict[str, Any] | None:
        return next((doc for doc in self.documents if _matches(doc, filter)), None)

    async def count(self, filter=None, options=None) -> int:
        self.calls.append(("count", filter, options))
        return sum(1 for doc in self.documents if _matches(doc, filter))

    async def find(self, filter=None, options=None) -> list[dict[str, Any]]:
        self.calls.append(("find", filter, options))
        return [copy.deepcopy(doc) for doc in self.documents if _matches(doc, filter)]

    async def find_one(self, filter=None, options=None) -> dict[str, Any] | None:
        self.calls.append(("find_one", filter, options))
        found = self._first(filter)
        return copy.deepcopy(found) if found is not None else None

    async def insert_one(self, document: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("insert_one", document))
        stored = {"_id": ObjectId(), **copy.deepcopy(document)}
        self.documents.append(stored)
        return {"insertedId": stored["_id"]}

    async def insert_many(self, documents: list[dict[str, Any]]) -> dict[str, Any]:
        self.calls.append(("insert_many", documents))
        ids = []
        for document in documents:
            stored = {"_id": ObjectId(), **copy.deepcopy(document)}
            self.documents.append(stored)
            ids.append(stored["_id"])
        return {"insertedIds": ids}

    async def _update(self, name, filter, update, options, many: bool) -> dict[str, Any]:
        self.calls.append((name, filter, update, options))
        matched = [doc for doc in self.documents if _matches(doc, filter)]
        if not many:
            matched = matched[:1]
        for doc in matched:
            _apply_update(doc, update, inserting=False)
        result: dict[str, Any] = {"matchedCount": len(matched), "modifiedCount": len(matched)}
        if not matched and (options or {}).get("upsert"):
            stored = {"_id": ObjectId(), **copy.deepcopy(filter or {})}
            _apply_update(stored, update, inserting=True)
            self.documents.append(stored)
            result["upsertedId"] = stored["_id"]
        return result

    async def update_one(self, filter, update, options=None) -> dict[str, Any]:
        return await self._update("update_one", filter, update, options, many=False)

    async def update_many(self, filter, update, options=None) -> dict[str, Any]:
        return await self._update("update_many", filter, update, options, many=True)

    async def delete_one(self, filter) -> dict[str, Any]:
        self.calls.append(("delete_one", filter))
        found = self._first(filter)
        if found is None:
            return {"deletedCount": 0}
        self.documents.remove(found)
        return {"deletedCount": 1}

    async def delete_many(self, filter) -> dict[str, Any]:
        self.calls.append(("delete_many", filter))
        before = len(self.documents)
        self.documents = [doc for doc in self.documents if not _matches(doc, filter)]
        return {"deletedCount": before - len(self.documents)}

    async def find_one_and_update(self, filter, update, options=None) -> dict[str, Any] | None:
        self.calls.append(("find_one_and_update", filter, update, options))
        found = self._first(filter)
        if found is None:
            return None
        before = copy.deepcopy(found)
        _apply_update(found, update, inserting=False)
        return copy.deepcopy(found) if (options or {}).get("return_new_document") else before

    async def find_one_and_replace(self, filter, replacement, options=None) -> dict[str, Any] | None:
        self.calls.append(("find_one_and_replace", filter, replacement, options))
        found = self._first(filter)
        if found is None:
            return None
        before = copy.deepcopy(found)
        index = self.documents.index(found)
        self.documents[index] = {"_id": found["_id"], **copy.deepcopy(replacement)}
        return copy.deepcopy(self.documents[index]) if (options or {}).get("return_new_document") else before

    async def find_one_and_delete(self, filter=None, options=None) -> dict[str, Any] | None:
        self.calls.append(("find_one_and_delete", filter, options))
        found = self._first(filter)
        if found is not None:
            self.documents.remove(found)
        return found

    async def aggregate(self, pipeline) -> list[dict[str, Any]]:
        self.calls.append(("aggregate", pipeline))
        return [copy.deepcopy(doc) for doc in self.documents]


class InMemoryDatabase:
    """Database double handing out one ``InMemoryCollection`` per name."""

    def __init__(self, name: str = "shop") -> None:
        self.name = name
        self.collections: dict[str, InMemoryCollection] = {}

    def collection(self, name: str) -> InMemoryCollection:
        if name not in self.collections:
            self.collections[name] = InMemoryCollection(name)
        return self.collections[name]


class FakeAuthenticator(Authenticator):
    """Authenticator double counting logins."""

    def __init__(self, database: InMemoryDatabase, error: Exception | None = None, delay: float = 0.0) -> None:
        self.database = database
        self.error = error
        self.delay = delay
        self.calls = 0
        self.configs: list[ConnectionConfig] = []
        self.closed = False

    async def authenticate(self, config: ConnectionConfig):
        self.calls += 1
        self.configs.append(config)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.database

    async def aclose(self) -> None:
        self.closed = True


class FrozenClock:
    """Clock double returning a fixed instant until advanced."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        environment="testing",
        app_id="app-test",
        api_key="test-api-key",
        database="shop",
    )


@pytest.fixture
def connection_config() -> ConnectionConfig:
    return ConnectionConfig(app_id="app-test", api_key="test-api-key", database="shop")


@pytest.fixture
def database() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture
def authenticator(database: InMemoryDatabase) -> FakeAuthenticator:
    return FakeAuthenticator(database)


@pytest.fixture
def make_authenticator(database: InMemoryDatabase):
    """Factory for authenticators that fail or take time to log in."""

    def _make(error: Exception | None = None, delay: float = 0.0) -> FakeAuthenticator:
        return FakeAuthenticator(database, error=error, delay=delay)

    return _make


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def client(authenticator: FakeAuthenticator, settings: Settings) -> Suricate:
    return Suricate(authenticator=authenticator, settings=settings)


@pytest_asyncio.fixture
async def connected_client(
    client: Suricate, connection_config: ConnectionConfig
) -> AsyncGenerator[Suricate, None]:
    await client.connect(connection_config)
    yield client
    await client.aclose()
