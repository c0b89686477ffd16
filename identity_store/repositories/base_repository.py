"""
Base repository implementation with common functionality for all repositories.

Every repository operation takes an optional ``tx`` session. A session passed
in is borrowed: the repository flushes into it but never commits, rolls back
or closes it. Without one, the repository opens its own session, and for
writes its own transaction, which commits only when every step succeeded.
"""

from contextlib import contextmanager
from typing import Any, Generic, Iterator, NoReturn, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db.db_config import Base, DatabaseManager
from ..db.db_errors import AlreadyExistsClassifier
from ..exceptions import BaseError, StorageError, already_exists
from ..utils.logger import ContextAwareLogger, get_logger

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Base repository with session and transaction handling."""

    resource_name = "Resource"

    def __init__(
        self,
        db_manager: DatabaseManager,
        entity_class: Type[T],
        classifier: Optional[AlreadyExistsClassifier] = None,
        logger: Optional[ContextAwareLogger] = None,
    ):
        """
        Initialize the base repository.

        Args:
            db_manager: Database manager providing sessions
            entity_class: SQLAlchemy model class this repository handles
            classifier: Recognises uniqueness violations (default: the manager's)
            logger: Optional logger instance
        """
        self.db_manager = db_manager
        self.entity_class = entity_class
        self.classifier = classifier if classifier is not None else db_manager.already_exists
        self.logger = logger or get_logger()
        self.entity_name = entity_class.__name__

    def _handle_db_error(
        self,
        e: Exception,
        operation_name: str,
        entity_id: Optional[str] = None,
        **context: Any,
    ) -> NoReturn:
        """
        Translate a failure inside a repository operation.

        Errors of this package pass through untouched, uniqueness violations
        become AlreadyExistsError, other database errors become StorageError,
        and anything else propagates unmodified.
        """
        if isinstance(e, BaseError):
            raise e

        error_context = {
            "operation_name": operation_name,
            "entity_type": self.entity_name,
            **context,
        }
        if entity_id:
            error_context["entity_id"] = entity_id

        if self.classifier.classify(e):
            raise already_exists(self.resource_name, cause=e, **error_context) from e

        if isinstance(e, SQLAlchemyError):
            raise StorageError(
                f"Database error for {self.entity_name} in {operation_name}",
                cause=e,
                **error_context,
            ) from e

        raise e

    @contextmanager
    def _session_operation(
        self, operation_name: str, tx: Optional[Session] = None, entity_id: Optional[str] = None
    ) -> Iterator[Session]:
        """
        Session for a read, borrowed or short-lived.

        A short-lived session is closed afterwards without committing.
        """
        session = tx if tx is not None else self.db_manager.new_session()
        try:
            yield session
        except Exception as e:
            self._handle_db_error(e, operation_name, entity_id)
        finally:
            if tx is None:
                session.close()

    @contextmanager
    def _transaction(
        self, operation_name: str, tx: Optional[Session] = None, entity_id: Optional[str] = None
    ) -> Iterator[Session]:
        """
        Session for a write.

        With a borrowed session the work is flushed so constraint violations
        surface here; committing stays with the caller. Otherwise a new
        transaction is committed on success and rolled back on any exception,
        cancellation included.
        """
        if tx is not None:
            try:
                yield tx
                tx.flush()
            except Exception as e:
                self._handle_db_error(e, operation_name, entity_id)
            return

        session = self.db_manager.new_session()
        try:
            with session.begin():
                yield session
        except Exception as e:
            self._handle_db_error(e, operation_name, entity_id)
        finally:
            session.close()
