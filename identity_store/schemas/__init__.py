"""Pydantic schemas for clients and connector configurations."""

from .client_schemas import Client, ClientCredentials
from .connector_schemas import (
    BUILTIN_CONNECTOR_CONFIGS,
    ConnectorConfig,
    ConnectorConfigRegistry,
    GitHubConnectorConfig,
    LDAPConnectorConfig,
    LocalConnectorConfig,
    OIDCConnectorConfig,
    default_connector_registry,
)

__all__ = [
    "Client",
    "ClientCredentials",
    "BUILTIN_CONNECTOR_CONFIGS",
    "ConnectorConfig",
    "ConnectorConfigRegistry",
    "GitHubConnectorConfig",
    "LDAPConnectorConfig",
    "LocalConnectorConfig",
    "OIDCConnectorConfig",
    "default_connector_registry",
]
