"""Lazily established, memoized database connection.

The first ``connect`` call authenticates and caches the database handle.
Later calls return immediately. Callers that arrive while the first attempt
is still running await that same attempt instead of authenticating again.
"""

import asyncio

from suricate.core.logging import get_logger
from suricate.domain.entities.connection import ConnectionConfig
from suricate.infrastructure.app_services.authenticator import Authenticator
from suricate.infrastructure.app_services.mongodb import RemoteDatabase

logger = get_logger(__name__)


class ConnectionHolder:
    """Owns the single database handle of a client.

    Args:
        authenticator: Performs the login and builds the handle.
    """

    def __init__(self, authenticator: Authenticator) -> None:
        self._authenticator = authenticator
        self._database: RemoteDatabase | None = None
        self._pending: asyncio.Future[None] | None = None

    @property
    def is_connected(self) -> bool:
        return self._database is not None

    def get_database(self) -> RemoteDatabase | None:
        """Return the cached handle, or None before the first successful connect."""
        return self._database

    async def connect(self, config: ConnectionConfig) -> None:
        """Authenticate once and cache the database handle.

        A failed attempt is forgotten so a later call can try again; every
        caller waiting on it receives the same exception. Cancelling one
        waiter does not cancel the shared attempt.
        """
        if self._database is not None:
            logger.debug("Already connected", database=self._database.name)
            return

        if self._pending is None:
            self._pending = asyncio.ensure_future(self._establish(config))
            self._pending.add_done_callback(self._clear_pending)

        await asyncio.shield(self._pending)

    async def _establish(self, config: ConnectionConfig) -> None:
        logger.info("Connecting", app_id=config.app_id, database=config.database)
        database = await self._authenticator.authenticate(config)
        self._database = database
        logger.info("Connected", app_id=config.app_id, database=config.database)

    def _clear_pending(self, future: "asyncio.Future[None]") -> None:
        if self._pending is future:
            self._pending = None
        if not future.cancelled() and future.exception() is not None:
            logger.warning("Connection attempt failed", error=str(future.exception()))

    async def aclose(self) -> None:
        """Drop the handle and release the authenticator's resources."""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._database = None
        await self._authenticator.aclose()
