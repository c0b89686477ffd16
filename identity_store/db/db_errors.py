"""
Backend-agnostic detection of uniqueness violations.

Every database driver reports a duplicate primary key differently, so each
backend registers a predicate that recognises its own flavour. Repositories
only ever ask the classifier whether an error means "already exists".
"""

import sqlite3
import threading
from typing import Callable, List, Optional

from ..constants import DatabaseType, PostgresErrorCode

AlreadyExistsPredicate = Callable[[BaseException], bool]


def _driver_error(error: BaseException) -> BaseException:
    # SQLAlchemy wraps the DBAPI exception in DBAPIError.orig
    return getattr(error, "orig", None) or error


def is_postgres_unique_violation(error: BaseException) -> bool:
    """Match SQLSTATE 23505 from psycopg (``sqlstate``) or psycopg2 (``pgcode``)."""
    orig = _driver_error(error)
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return code == PostgresErrorCode.UNIQUE_VIOLATION


def is_sqlite_unique_violation(error: BaseException) -> bool:
    """Match the sqlite3 integrity error raised for a duplicate key."""
    orig = _driver_error(error)
    if not isinstance(orig, sqlite3.IntegrityError):
        return False
    message = str(orig)
    return message.startswith("UNIQUE constraint failed") or message.startswith(
        "PRIMARY KEY must be unique"
    )


class AlreadyExistsClassifier:
    """Append-only set of predicates that recognise uniqueness violations."""

    def __init__(self, predicates: Optional[List[AlreadyExistsPredicate]] = None):
        self._predicates: List[AlreadyExistsPredicate] = list(predicates or [])
        self._lock = threading.Lock()

    def register(self, predicate: AlreadyExistsPredicate) -> None:
        with self._lock:
            self._predicates.append(predicate)

    def classify(self, error: BaseException) -> bool:
        """Return True if any registered predicate matches the error."""
        return any(predicate(error) for predicate in tuple(self._predicates))

    def __len__(self) -> int:
        return len(self._predicates)


_DIALECT_PREDICATES = {
    DatabaseType.POSTGRES.value: is_postgres_unique_violation,
    "postgresql": is_postgres_unique_violation,
    DatabaseType.SQLITE.value: is_sqlite_unique_violation,
}


def classifier_for_dialect(name: str) -> AlreadyExistsClassifier:
    """
    Build a classifier wired with the predicate for one backend.

    Unknown backends get an empty classifier, so their duplicates surface as
    plain storage errors.
    """
    classifier = AlreadyExistsClassifier()
    predicate = _DIALECT_PREDICATES.get(name.lower())
    if predicate is not None:
        classifier.register(predicate)
    return classifier
