"""Repository layer for data access."""

from .base_repository import BaseRepository
from .client_repository import ClientRepository
from .connector_config_repository import ConnectorConfigRepository

__all__ = [
    "BaseRepository",
    "ClientRepository",
    "ConnectorConfigRepository",
]
