import os
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, scoped_session, sessionmaker

from ..constants import DatabaseType, EnvironmentVariable
from ..exceptions import ErrorCode, ServiceError, ValidationError
from ..utils import get_logger
from .db_errors import AlreadyExistsClassifier, classifier_for_dialect

# Base class for all SQLAlchemy models
Base: Any = declarative_base()


class DatabaseConfig(BaseModel):
    db_type: str = DatabaseType.POSTGRES.value
    database: str
    host: Optional[str] = None
    port: str = "5432"
    username: Optional[str] = None
    password: Optional[str] = None
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 30
    echo: bool = False
    development_mode: bool = False

    def get_connection_string(self) -> str:
        if self.db_type.lower() == DatabaseType.POSTGRES.value:
            if not all([self.host, self.database, self.username, self.password]):
                raise ValidationError(
                    "Missing required Postgres configuration parameters",
                    error_code=ErrorCode.MISSING_REQUIRED,
                    field="database_config",
                    value={"host": self.host, "database": self.database, "username": self.username},
                )
            return (
                f"postgresql://{self.username}:{self.password}@"
                f"{self.host}:{self.port}/{self.database}"
            )
        elif self.db_type.lower() == DatabaseType.SQLITE.value:
            return f"sqlite:///{self.database}"
        raise ValidationError(
            f"Unsupported database type: {self.db_type}",
            error_code=ErrorCode.INVALID_FORMAT,
            field="db_type",
            value=self.db_type,
        )

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def __repr__(self) -> str:
        """String representation with masked password for security."""
        return (
            f"DatabaseConfig("
            f"db_type='{self.db_type}', "
            f"host='{self.host}', "
            f"port='{self.port}', "
            f"database='{self.database}', "
            f"username='{self.username}', "
            f"password='***')"
        )


class DatabaseManager:
    """
    Database connection manager that uses a Pydantic DatabaseConfig.

    Besides the engine and session factories it owns the already-exists
    classifier for its backend, which repositories borrow by default.
    """

    def __init__(
        self,
        config: DatabaseConfig,
        already_exists: Optional[AlreadyExistsClassifier] = None,
    ):
        self.config = config
        self.engine = self._create_engine()
        self.session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        self.scoped_session = scoped_session(self.session_factory)
        self.already_exists = already_exists or classifier_for_dialect(self.engine.dialect.name)

    def _create_engine(self):
        connection_string = self.config.get_connection_string()
        # Bound parameters carry secrets and hashes; keep them out of error text
        if self.config.db_type.lower() == DatabaseType.SQLITE.value:
            connect_args = {"check_same_thread": False}
            return create_engine(
                connection_string,
                echo=self.config.echo,
                hide_parameters=True,
                connect_args=connect_args,
            )
        return create_engine(
            connection_string,
            echo=self.config.echo,
            pool_size=self.config.pool_size,
            max_overflow=self.config.max_overflow,
            pool_timeout=self.config.pool_timeout,
            pool_pre_ping=True,
            hide_parameters=True,
        )

    def create_tables(self) -> None:
        Base.metadata.create_all(self.engine)

    def drop_tables(self) -> None:
        if self.config.development_mode:
            Base.metadata.drop_all(self.engine)
        else:
            raise ServiceError(
                "Cannot drop tables: not in development mode",
                error_code=ErrorCode.CONFIGURATION_ERROR,
                operation="drop_tables",
                development_mode=self.config.development_mode,
            )

    def new_session(self) -> Session:
        """Open an independent session, owned by the caller."""
        return self.session_factory()

    def get_session(self) -> Session:
        """Return the thread's scoped session."""
        return self.scoped_session()

    def close_session(self, session: Optional[Session] = None) -> None:
        if session:
            session.close()
        else:
            self.scoped_session.remove()

    def close(self) -> None:
        self.scoped_session.remove()
        self.engine.dispose()


def get_development_config() -> DatabaseConfig:
    """
    Get SQLite configuration for development.
    """
    return DatabaseConfig(
        db_type=DatabaseType.SQLITE.value,
        database=os.environ.get(EnvironmentVariable.DEV_DB_PATH.value, "identity_store.db"),
        echo=os.environ.get(EnvironmentVariable.DB_ECHO.value, "False").lower() == "true",
        development_mode=True,
    )


def get_production_config() -> DatabaseConfig:
    """
    Get Postgres configuration for production from environment variables.
    """
    return DatabaseConfig(
        db_type=DatabaseType.POSTGRES.value,
        host=os.environ.get(EnvironmentVariable.DB_HOST.value, "localhost"),
        port=os.environ.get(EnvironmentVariable.DB_PORT.value, "5432"),
        database=os.environ.get(EnvironmentVariable.DB_NAME.value, "identity"),
        username=os.environ.get(EnvironmentVariable.DB_USER.value, "postgres"),
        password=os.environ.get(EnvironmentVariable.DB_PASSWORD.value, ""),
        pool_size=int(os.environ.get(EnvironmentVariable.DB_POOL_SIZE.value, "5")),
        max_overflow=int(os.environ.get(EnvironmentVariable.DB_MAX_OVERFLOW.value, "10")),
        pool_timeout=int(os.environ.get(EnvironmentVariable.DB_POOL_TIMEOUT.value, "30")),
        echo=os.environ.get(EnvironmentVariable.DB_ECHO.value, "False").lower() == "true",
        development_mode=False,
    )


def import_all_models():
    """Import all models to ensure they're registered with SQLAlchemy metadata."""
    from sqlalchemy.orm import configure_mappers

    from .db_client_models import ClientIdentity  # noqa
    from .db_connector_models import ConnectorConfigRecord  # noqa

    configure_mappers()


# Global database manager instance
_db_manager: Optional[DatabaseManager] = None


def get_db_manager() -> DatabaseManager:
    """
    Get the global database manager instance.

    Raises:
        ServiceError: If no database manager has been initialized
    """
    global _db_manager
    if _db_manager is None:
        raise ServiceError(
            "Database manager not initialized. Call initialize_db() first.",
            error_code=ErrorCode.CONFIGURATION_ERROR,
            operation="get_db_manager",
        )
    return _db_manager


def set_db_manager(manager: DatabaseManager) -> None:
    """
    Set the global database manager instance.

    This is primarily used for testing to inject a test database manager.
    """
    global _db_manager
    _db_manager = manager


def initialize_db(config: Optional[DatabaseConfig] = None) -> DatabaseManager:
    """
    Initialize the global database manager with the given config.

    Tables are created when missing. Schema migrations are managed outside
    this package.

    Args:
        config: Optional DatabaseConfig. If None, uses production config from environment.

    Returns:
        DatabaseManager: The initialized database manager
    """
    global _db_manager

    if config is None:
        config = get_production_config()

    get_logger().info(
        "Initializing database", extra={"db_type": config.db_type, "database": config.database}
    )
    _db_manager = DatabaseManager(config)

    import_all_models()
    _db_manager.create_tables()

    return _db_manager


def close_db() -> None:
    """
    Close the database connections and dispose of the engine.
    """
    global _db_manager
    if _db_manager:
        _db_manager.close()
        _db_manager = None
