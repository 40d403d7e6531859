"""HTTP transport for the MongoDB Atlas App Services client API.

Handles the three requests every remote operation depends on:
- Location discovery: resolves the regional hostname of the application
- API key login: exchanges a server API key for access and refresh tokens
- Function calls: runs service functions (``find``, ``insertOne``, ...)
  with bodies encoded as MongoDB Extended JSON

An expired access token is refreshed once with the refresh token and the
call is repeated; any other failure raises ``AppServicesError``.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any

import httpx
from bson import json_util
from bson.json_util import CANONICAL_JSON_OPTIONS

from suricate.core.exceptions import AppServicesError
from suricate.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://services.cloud.mongodb.com"
API_PREFIX = "/api/client/v2.0"


@dataclass
class Session:
    """Tokens for an authenticated App Services user.

    Attributes:
        user_id: ID of the API key user.
        access_token: Short-lived bearer token for requests.
        refresh_token: Long-lived token used to obtain new access tokens.
        device_id: Device ID assigned by the server, if any.
    """

    user_id: str
    access_token: str = field(repr=False)
    refresh_token: str = field(repr=False)
    device_id: str | None = None


class AppServicesTransport:
    """Authenticated HTTP client for one App Services application.

    Args:
        app_id: App Services application ID.
        base_url: Global base URL used for location discovery.
        http_client: Optional pre-configured client. When given, the caller
            owns it and ``aclose`` leaves it open.
        timeout: Request timeout in seconds for the internally created client.
    """

    def __init__(
        self,
        app_id: str,
        base_url: str = DEFAULT_BASE_URL,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._app_id = app_id
        self._base_url = base_url.rstrip("/")
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = http_client is None
        self._hostname: str | None = None
        self._session: Session | None = None
        self._refresh_lock = asyncio.Lock()

    @property
    def app_id(self) -> str:
        return self._app_id

    @property
    def session(self) -> Session | None:
        return self._session

    async def resolve_hostname(self) -> str:
        """Return the regional hostname of the application, fetching it once."""
        if self._hostname is None:
            url = f"{self._base_url}{API_PREFIX}/app/{self._app_id}/location"
            response = await self._client.get(url)
            data = self._parse(response)
            self._hostname = str(data["hostname"]).rstrip("/")
            logger.debug(
                "Resolved app location",
                app_id=self._app_id,
                hostname=self._hostname,
                location=data.get("location"),
            )
        return self._hostname

    async def _app_url(self, path: str) -> str:
        hostname = await self.resolve_hostname()
        return f"{hostname}{API_PREFIX}/app/{self._app_id}{path}"

    async def log_in_with_api_key(self, api_key: str) -> Session:
        """Authenticate with a server API key.

        Raises:
            AppServicesError: If the server rejects the key.
        """
        url = await self._app_url("/auth/providers/api-key/login")
        response = await self._client.post(url, json={"key": api_key})
        data = self._parse(response)

        self._session = Session(
            user_id=data["user_id"],
            access_token=data["access_token"],
            refresh_token=data["refresh_token"],
            device_id=data.get("device_id"),
        )
        logger.info("Authenticated with API key", app_id=self._app_id, user_id=self._session.user_id)
        return self._session

    async def refresh_access_token(self, stale_token: str | None = None) -> str:
        """Obtain a new access token using the refresh token.

        Args:
            stale_token: The token that was rejected. If another caller has
                already replaced it, no request is made.
        """
        session = self._require_session()
        async with self._refresh_lock:
            if stale_token is not None and session.access_token != stale_token:
                return session.access_token

            hostname = await self.resolve_hostname()
            response = await self._client.post(
                f"{hostname}{API_PREFIX}/auth/session",
                headers={"Authorization": f"Bearer {session.refresh_token}"},
            )
            data = self._parse(response)
            session.access_token = data["access_token"]
            logger.debug("Refreshed access token", app_id=self._app_id, user_id=session.user_id)
            return session.access_token

    async def call_function(
        self,
        name: str,
        arguments: list[Any],
        service: str | None = None,
    ) -> Any:
        """Call a function on the application, optionally scoped to a service.

        Args:
            name: Function name, e.g. ``find``.
            arguments: Positional arguments, encoded as canonical Extended JSON.
            service: Service name, e.g. ``mongodb-atlas``.

        Returns:
            The decoded function result.
        """
        body: dict[str, Any] = {"name": name, "arguments": arguments}
        if service is not None:
            body["service"] = service

        url = await self._app_url("/functions/call")
        content = json_util.dumps(body, json_options=CANONICAL_JSON_OPTIONS)
        response = await self._post_authenticated(url, content)

        if not response.content:
            return None
        return json_util.loads(response.text)

    async def _post_authenticated(self, url: str, content: str) -> httpx.Response:
        session = self._require_session()
        token = session.access_token
        response = await self._client.post(url, content=content, headers=self._headers(token))

        if response.status_code == httpx.codes.UNAUTHORIZED:
            logger.debug("Access token rejected, refreshing", app_id=self._app_id)
            token = await self.refresh_access_token(stale_token=token)
            response = await self._client.post(url, content=content, headers=self._headers(token))

        self._raise_for_status(response)
        return response

    @staticmethod
    def _headers(token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _require_session(self) -> Session:
        if self._session is None:
            raise AppServicesError("Not authenticated. Log in before calling functions.")
        return self._session

    def _parse(self, response: httpx.Response) -> dict[str, Any]:
        self._raise_for_status(response)
        return response.json()

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return

        message = response.reason_phrase or f"HTTP {response.status_code}"
        error_code = None
        try:
            data = response.json()
        except ValueError:
            data = None
        if isinstance(data, dict):
            message = data.get("error", message)
            error_code = data.get("error_code")

        raise AppServicesError(message, status_code=response.status_code, error_code=error_code)

    async def aclose(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()
