"""
Shared test fixtures for the identity store.

Every test gets its own file-backed SQLite database, a cheap bcrypt work
factor, and fresh registries.
"""

import pytest
from sqlalchemy.orm import Session

from identity_store.config import AppConfig, SecurityConfig, reset_config, set_config
from identity_store.db import DatabaseConfig, DatabaseManager, import_all_models
from identity_store.repositories import ClientRepository, ConnectorConfigRepository
from identity_store.schemas import default_connector_registry
from identity_store.utils.logger import reset_logging
from identity_store.utils.password_utils import PasswordHasher

TEST_BCRYPT_COST = 4


@pytest.fixture(autouse=True)
def app_config():
    """Install a test configuration with the cheapest bcrypt cost."""
    config = AppConfig(security=SecurityConfig(bcrypt_cost=TEST_BCRYPT_COST))
    set_config(config)
    yield config
    reset_config()
    reset_logging()


@pytest.fixture(scope="function")
def db_config(tmp_path) -> DatabaseConfig:
    """SQLite database file private to the test."""
    return DatabaseConfig(
        db_type="sqlite",
        database=str(tmp_path / "identity.db"),
        echo=False,
        development_mode=True,
    )


@pytest.fixture(scope="function")
def db_manager(db_config: DatabaseConfig) -> DatabaseManager:
    """Database manager with all tables created."""
    import_all_models()
    manager = DatabaseManager(db_config)
    manager.create_tables()

    yield manager

    manager.close()


@pytest.fixture(scope="function")
def db_session(db_manager: DatabaseManager) -> Session:
    """Independent session for inspecting and seeding rows directly."""
    session = db_manager.new_session()

    yield session

    session.rollback()
    session.close()


@pytest.fixture(scope="function")
def hasher() -> PasswordHasher:
    return PasswordHasher(cost=TEST_BCRYPT_COST)


@pytest.fixture(scope="function")
def client_repository(db_manager, hasher) -> ClientRepository:
    return ClientRepository(db_manager, hasher=hasher)


@pytest.fixture(scope="function")
def connector_registry():
    return default_connector_registry()


@pytest.fixture(scope="function")
def connector_config_repository(db_manager, connector_registry) -> ConnectorConfigRepository:
    return ConnectorConfigRepository(db_manager, registry=connector_registry)
