"""
Centralized configuration management for the identity store.

This module provides a unified configuration system with support for:
- Environment variables
- Validation using Pydantic
- A process-wide configuration instance that tests can replace
"""

import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .constants import EnvironmentVariable, LogLevel, SecretLimits


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.LOG_LEVEL.value, LogLevel.INFO.value),
        description="Logging level",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string",
    )
    enable_logs_queue: bool = Field(
        default_factory=lambda: _env_flag(EnvironmentVariable.ENABLE_LOGS_QUEUE.value),
        description="Ship structured log entries to an Azure Storage queue",
    )
    queue_name: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.LOG_QUEUE_NAME.value, "logs-queue"),
        description="Queue receiving structured log entries",
    )
    queue_connection_string: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.AZURE_STORAGE_CONNECTION.value, ""),
        description="Azure Storage connection string for the logs queue",
    )

    @field_validator("level")
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {level.value for level in LogLevel}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


class SecurityConfig(BaseModel):
    """Security-related configuration."""

    bcrypt_cost: int = Field(
        default_factory=lambda: int(
            os.getenv(
                EnvironmentVariable.BCRYPT_COST.value, str(SecretLimits.DEFAULT_BCRYPT_COST)
            )
        ),
        ge=SecretLimits.MIN_BCRYPT_COST,
        le=SecretLimits.MAX_BCRYPT_COST,
        description="bcrypt work factor used when hashing client secrets",
    )


class AppConfig(BaseModel):
    """Main application configuration."""

    # Sub-configurations
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    security: SecurityConfig = Field(
        default_factory=SecurityConfig, description="Security configuration"
    )

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create configuration from environment variables."""
        return cls()



# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def set_config(config: AppConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global configuration instance."""
    global _config
    _config = None
