"""
Constants and enums for the identity store.

This module centralizes the magic strings and limits used by the credential
and connector stores so they stay consistent across modules.
"""

from enum import Enum


class TableName(str, Enum):
    """Tables owned by the stores."""

    CLIENT_IDENTITY = "client_identity"
    CONNECTOR_CONFIG = "connector_config"


class DatabaseType(str, Enum):
    """Supported database backends."""

    POSTGRES = "postgres"
    SQLITE = "sqlite"


class LogLevel(str, Enum):
    """Standard logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnvironmentVariable(str, Enum):
    """Standard environment variable names."""

    AZURE_STORAGE_CONNECTION = "AzureWebJobsStorage"
    LOG_LEVEL = "LOG_LEVEL"
    LOG_QUEUE_NAME = "LOG_QUEUE_NAME"
    ENABLE_LOGS_QUEUE = "ENABLE_LOGS_QUEUE"
    BCRYPT_COST = "BCRYPT_COST"
    DEV_DB_PATH = "DEV_DB_PATH"
    DB_HOST = "DB_HOST"
    DB_PORT = "DB_PORT"
    DB_NAME = "DB_NAME"
    DB_USER = "DB_USER"
    DB_PASSWORD = "DB_PASSWORD"
    DB_POOL_SIZE = "DB_POOL_SIZE"
    DB_MAX_OVERFLOW = "DB_MAX_OVERFLOW"
    DB_POOL_TIMEOUT = "DB_POOL_TIMEOUT"
    DB_ECHO = "DB_ECHO"


class SecretLimits:
    """Limits for client secrets and their hashes."""

    # bcrypt only looks at the first 72 bytes of its input.
    MAX_SECRET_LENGTH = 72
    GENERATED_SECRET_LENGTH = 72
    DEFAULT_BCRYPT_COST = 10
    MIN_BCRYPT_COST = 4
    MAX_BCRYPT_COST = 31


class PostgresErrorCode:
    """SQLSTATE codes reported by PostgreSQL drivers."""

    UNIQUE_VIOLATION = "23505"
