"""MongoDB Atlas App Services driver.

Authenticates with an API key and exposes remote databases and
collections whose operations run as App Services function calls.
"""

from suricate.infrastructure.app_services.authenticator import (
    AppServicesAuthenticator,
    Authenticator,
)
from suricate.infrastructure.app_services.mongodb import (
    DEFAULT_SERVICE_NAME,
    RemoteCollection,
    RemoteDatabase,
)
from suricate.infrastructure.app_services.transport import (
    DEFAULT_BASE_URL,
    AppServicesTransport,
    Session,
)

__all__ = [
    "AppServicesAuthenticator",
    "AppServicesTransport",
    "Authenticator",
    "DEFAULT_BASE_URL",
    "DEFAULT_SERVICE_NAME",
    "RemoteCollection",
    "RemoteDatabase",
    "Session",
]
