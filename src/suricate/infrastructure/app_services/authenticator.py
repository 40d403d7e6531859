"""Authenticators that turn a connection config into a database handle."""

from abc import ABC, abstractmethod

import httpx

from suricate.core.config import Settings, get_settings
from suricate.domain.entities.connection import ConnectionConfig
from suricate.infrastructure.app_services.mongodb import RemoteDatabase
from suricate.infrastructure.app_services.transport import AppServicesTransport


class Authenticator(ABC):
    """Abstract base class for authenticators."""

    @abstractmethod
    async def authenticate(self, config: ConnectionConfig) -> RemoteDatabase:
        """Log in and return a handle scoped to ``config.database``."""
        ...

    async def aclose(self) -> None:
        """Release resources held by the authenticated session."""
        return None


class AppServicesAuthenticator(Authenticator):
    """Log in to App Services with a server API key.

    Args:
        settings: Supplies the base URL, data source name and timeout.
        http_client: Optional shared HTTP client, left open on ``aclose``.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._http_client = http_client
        self._transport: AppServicesTransport | None = None

    async def authenticate(self, config: ConnectionConfig) -> RemoteDatabase:
        transport = AppServicesTransport(
            config.app_id,
            base_url=self._settings.base_url,
            http_client=self._http_client,
            timeout=self._settings.request_timeout,
        )
        try:
            await transport.log_in_with_api_key(config.api_key)
        except BaseException:
            await transport.aclose()
            raise

        self._transport = transport
        return RemoteDatabase(transport, self._settings.service_name, config.database)

    async def aclose(self) -> None:
        if self._transport is not None:
            await self._transport.aclose()
            self._transport = None
