"""Connection configuration entity."""

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from suricate.core.config import Settings


class ConnectionConfig(BaseModel):
    """Credentials and target database for one remote connection.

    Attributes:
        app_id: App Services application ID.
        api_key: Server API key used to authenticate.
        database: Name of the database the handle is scoped to.
    """

    model_config = ConfigDict(frozen=True)

    app_id: str = Field(..., min_length=1, description="App Services application ID")
    api_key: str = Field(..., min_length=1, repr=False, description="Server API key")
    database: str = Field(..., min_length=1, description="Remote database name")

    @classmethod
    def from_settings(cls, settings: "Settings") -> "ConnectionConfig":
        """Build a config from loaded settings.

        Raises:
            pydantic.ValidationError: If any of the values is empty.
        """
        return cls(
            app_id=settings.app_id,
            api_key=settings.api_key,
            database=settings.database,
        )
