"""
Persistence and verification core for an identity provider's client
credentials and upstream connector configurations.
"""

from .exceptions import (
    AlreadyExistsError,
    DecodeError,
    DeserializationError,
    HashingError,
    NotFoundError,
    StorageError,
    UnknownTypeError,
    ValidationError,
)
from .repositories import ClientRepository, ConnectorConfigRepository
from .schemas import Client, ClientCredentials, ConnectorConfig, ConnectorConfigRegistry

__version__ = "0.1.0"

__all__ = [
    "AlreadyExistsError",
    "DecodeError",
    "DeserializationError",
    "HashingError",
    "NotFoundError",
    "StorageError",
    "UnknownTypeError",
    "ValidationError",
    "ClientRepository",
    "ConnectorConfigRepository",
    "Client",
    "ClientCredentials",
    "ConnectorConfig",
    "ConnectorConfigRegistry",
]
