"""
Unit tests for the configuration system.
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError as PydanticValidationError

from identity_store.config import (
    AppConfig,
    LoggingConfig,
    SecurityConfig,
    get_config,
    reset_config,
    set_config,
)


class TestLoggingConfig:
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = LoggingConfig()

        assert config.level == "INFO"
        assert config.enable_logs_queue is False
        assert config.queue_name == "logs-queue"
        assert config.queue_connection_string == ""

    def test_from_env(self):
        env = {
            "LOG_LEVEL": "debug",
            "ENABLE_LOGS_QUEUE": "true",
            "LOG_QUEUE_NAME": "identity-logs",
            "AzureWebJobsStorage": "UseDevelopmentStorage=true",
        }
        with patch.dict(os.environ, env, clear=True):
            config = LoggingConfig()

        assert config.level == "DEBUG"
        assert config.enable_logs_queue is True
        assert config.queue_name == "identity-logs"
        assert config.queue_connection_string == "UseDevelopmentStorage=true"

    def test_invalid_level(self):
        with pytest.raises(PydanticValidationError):
            LoggingConfig(level="LOUD")


class TestSecurityConfig:
    def test_default_cost(self):
        with patch.dict(os.environ, {}, clear=True):
            assert SecurityConfig().bcrypt_cost == 10

    def test_cost_from_env(self):
        with patch.dict(os.environ, {"BCRYPT_COST": "12"}, clear=True):
            assert SecurityConfig().bcrypt_cost == 12

    @pytest.mark.parametrize("cost", [3, 32])
    def test_cost_bounds(self, cost):
        with pytest.raises(PydanticValidationError):
            SecurityConfig(bcrypt_cost=cost)


class TestAppConfig:
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = AppConfig.from_env()

        assert isinstance(config.logging, LoggingConfig)
        assert isinstance(config.security, SecurityConfig)
        assert config.security.bcrypt_cost == 10

    def test_holds_only_store_settings(self):
        assert set(AppConfig.model_fields) == {"logging", "security"}


class TestGlobalConfig:
    def test_set_and_get(self):
        config = AppConfig(security=SecurityConfig(bcrypt_cost=6))

        set_config(config)

        assert get_config() is config

    def test_reset_builds_from_env(self):
        set_config(AppConfig(security=SecurityConfig(bcrypt_cost=6)))
        reset_config()

        with patch.dict(os.environ, {"BCRYPT_COST": "11"}):
            assert get_config().security.bcrypt_cost == 11
