"""Suricate client: the composition root.

Owns the connection holder and the error observer and hands out
collection facades bound to them.

Example:
    client = Suricate()
    await client.connect(ConnectionConfig(app_id="app-abcde", api_key="...", database="shop"))

    users = client.scheme("users", {"name": str, "age": NonNegativeInt})
    await users.insert_one({"name": "a", "age": 3})
"""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from suricate.core.config import Settings, get_settings
from suricate.core.exceptions import InitializationError
from suricate.core.logging import get_logger
from suricate.core.observers import ErrorObserver, RaisingErrorObserver
from suricate.domain.entities.connection import ConnectionConfig
from suricate.domain.entities.error_event import InitializationErrorEvent
from suricate.domain.services.schema_validator import Schema
from suricate.domain.services.timestamp_service import Clock
from suricate.infrastructure.app_services.authenticator import (
    AppServicesAuthenticator,
    Authenticator,
)
from suricate.infrastructure.app_services.mongodb import RemoteDatabase
from suricate.infrastructure.persistence.connection_holder import ConnectionHolder
from suricate.infrastructure.persistence.scheme import Scheme

logger = get_logger(__name__)


class Suricate:
    """Entry point for working with remote collections.

    Args:
        error_observer: Notified on validation and initialization failures.
            Defaults to ``RaisingErrorObserver``.
        authenticator: Builds the database handle on connect. Defaults to
            ``AppServicesAuthenticator``.
        settings: Settings used for defaults. Loaded from the environment
            when omitted.
    """

    def __init__(
        self,
        error_observer: ErrorObserver | None = None,
        authenticator: Authenticator | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._observer = error_observer or RaisingErrorObserver()
        self._connection = ConnectionHolder(
            authenticator or AppServicesAuthenticator(self._settings)
        )

    @property
    def error_observer(self) -> ErrorObserver:
        return self._observer

    @property
    def is_connected(self) -> bool:
        return self._connection.is_connected

    async def connect(self, config: ConnectionConfig | None = None) -> None:
        """Connect once; later calls are no-ops.

        Args:
            config: Credentials and database. Taken from settings when omitted.

        Raises:
            InitializationError: If no config is given and settings are incomplete.
            AppServicesError: If authentication fails.
        """
        if config is None:
            config = self._config_from_settings()
        await self._connection.connect(config)

    def _config_from_settings(self) -> ConnectionConfig:
        try:
            return ConnectionConfig.from_settings(self._settings)
        except PydanticValidationError as e:
            missing = sorted({str(error["loc"][0]) for error in e.errors()})
            event = InitializationErrorEvent(
                message=f"Missing connection settings: {', '.join(missing)}"
            )
            self._observer.on_error(event)
            raise InitializationError(event.message) from e

    def get_database(self) -> RemoteDatabase | None:
        """Return the connected database handle, or None before ``connect``."""
        return self._connection.get_database()

    def scheme(
        self,
        collection_name: str,
        schema: Schema | Mapping[str, Any] | None = None,
        clock: Clock | None = None,
    ) -> Scheme:
        """Create a facade for one collection.

        Args:
            collection_name: Name of the remote collection.
            schema: A ``Schema`` or a mapping of field specs. None disables validation.
            clock: Optional time source for timestamps.
        """
        if schema is not None and not isinstance(schema, Schema):
            schema = Schema(schema, name=_model_name(collection_name))
        return Scheme(
            self._connection.get_database,
            self._observer,
            collection_name,
            schema=schema,
            clock=clock,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP session."""
        await self._connection.aclose()
        logger.debug("Client closed")

    async def __aenter__(self) -> "Suricate":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()


def _model_name(collection_name: str) -> str:
    parts = [part for part in collection_name.replace("-", "_").split("_") if part]
    return "".join(part[:1].upper() + part[1:] for part in parts) or "Document"
