"""Unit tests for the Suricate client."""

import pytest

from suricate.client import Suricate, _model_name
from suricate.core.exceptions import InitializationError
from suricate.core.observers import CallbackErrorObserver, RaisingErrorObserver
from suricate.core.config import Settings
from suricate.domain.entities.error_event import InitializationErrorEvent
from suricate.domain.services.schema_validator import Schema
from suricate.infrastructure.persistence.scheme import Scheme


def test_default_observer_raises(client):
    assert isinstance(client.error_observer, RaisingErrorObserver)


@pytest.mark.asyncio
async def test_connect_with_explicit_config(client, authenticator, database, connection_config):
    await client.connect(connection_config)

    assert client.is_connected
    assert client.get_database() is database
    assert authenticator.configs == [connection_config]


@pytest.mark.asyncio
async def test_connect_defaults_to_settings(client, authenticator):
    await client.connect()

    config = authenticator.configs[0]
    assert (config.app_id, config.api_key, config.database) == ("app-test", "test-api-key", "shop")


@pytest.mark.asyncio
async def test_connect_with_incomplete_settings_notifies_observer(authenticator):
    events = []
    settings = Settings(_env_file=None, environment="testing", app_id="app-test")
    client = Suricate(
        error_observer=CallbackErrorObserver(events.append),
        authenticator=authenticator,
        settings=settings,
    )

    with pytest.raises(InitializationError, match="api_key, database"):
        await client.connect()

    assert len(events) == 1
    assert isinstance(events[0], InitializationErrorEvent)
    assert authenticator.calls == 0


def test_scheme_builds_schema_from_mapping(client):
    users = client.scheme("user_profiles", {"name": str})

    assert isinstance(users, Scheme)
    assert users.name == "user_profiles"
    assert users.schema.name == "UserProfiles"
    assert users.schema.field_names == ("name",)


def test_scheme_accepts_schema_instance(client):
    schema = Schema({"name": str}, name="Person")

    assert client.scheme("people", schema).schema is schema


def test_scheme_without_schema(client):
    assert client.scheme("logs").schema is None


@pytest.mark.asyncio
async def test_scheme_sees_later_connection(client, connection_config, database):
    users = client.scheme("users")

    await client.connect(connection_config)
    await users.insert_one({"name": "a"})

    assert len(database.collection("users").documents) == 1


@pytest.mark.asyncio
async def test_context_manager_closes(client, authenticator, connection_config):
    async with client as entered:
        await entered.connect(connection_config)
        assert entered is client

    assert not client.is_connected
    assert authenticator.closed


@pytest.mark.parametrize(
    "collection_name,expected",
    [
        ("users", "Users"),
        ("order-items", "OrderItems"),
        ("audit_log", "AuditLog"),
        ("__", "Document"),
    ],
)
def test_model_name(collection_name, expected):
    assert _model_name(collection_name) == expected
