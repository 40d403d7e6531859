"""Connection management and collection facades."""

from suricate.infrastructure.persistence.connection_holder import ConnectionHolder
from suricate.infrastructure.persistence.scheme import Scheme

__all__ = ["ConnectionHolder", "Scheme"]
