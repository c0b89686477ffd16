"""
SQLAlchemy models and database wiring for the identity store.
"""

from .db_client_models import ClientIdentity
from .db_config import (
    Base,
    DatabaseConfig,
    DatabaseManager,
    close_db,
    get_db_manager,
    get_development_config,
    get_production_config,
    import_all_models,
    initialize_db,
    set_db_manager,
)
from .db_connector_models import ConnectorConfigRecord
from .db_errors import (
    AlreadyExistsClassifier,
    classifier_for_dialect,
    is_postgres_unique_violation,
    is_sqlite_unique_violation,
)

__all__ = [
    # Configuration
    "Base",
    "DatabaseConfig",
    "DatabaseManager",
    "close_db",
    "get_db_manager",
    "get_development_config",
    "get_production_config",
    "import_all_models",
    "initialize_db",
    "set_db_manager",
    # Uniqueness violations
    "AlreadyExistsClassifier",
    "classifier_for_dialect",
    "is_postgres_unique_violation",
    "is_sqlite_unique_violation",
    # Models
    "ClientIdentity",
    "ConnectorConfigRecord",
]
