"""
Connector configuration store.

Each row holds one upstream identity connector's configuration as JSON, next
to the type tag that says which configuration class the JSON belongs to.
"""

from typing import Iterable, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from ..db.db_config import DatabaseManager
from ..db.db_connector_models import ConnectorConfigRecord
from ..db.db_errors import AlreadyExistsClassifier
from ..exceptions import DeserializationError, ValidationError, not_found
from ..schemas.connector_schemas import (
    ConnectorConfig,
    ConnectorConfigRegistry,
    default_connector_registry,
)
from ..utils.json_utils import dumps, loads
from .base_repository import BaseRepository


class ConnectorConfigRepository(BaseRepository[ConnectorConfigRecord]):
    """Repository for the connector_config table."""

    resource_name = "ConnectorConfig"

    def __init__(
        self,
        db_manager: DatabaseManager,
        registry: Optional[ConnectorConfigRegistry] = None,
        classifier: Optional[AlreadyExistsClassifier] = None,
    ):
        super().__init__(db_manager, ConnectorConfigRecord, classifier)
        self.registry = registry if registry is not None else default_connector_registry()

    def _to_record(self, config: ConnectorConfig) -> ConnectorConfigRecord:
        type_tag = self.registry.type_of(config)
        try:
            document = dumps(config.to_document())
        except (TypeError, ValueError) as e:
            raise ValidationError(
                "Connector config is not JSON serializable",
                field="config",
                cause=e,
                connector_id=config.id,
            ) from e
        return ConnectorConfigRecord(id=config.id, type=type_tag, config=document)

    def _to_config(self, record: ConnectorConfigRecord) -> ConnectorConfig:
        config_class = self.registry.config_class_for(record.type)

        try:
            document = loads(record.config)
        except (TypeError, ValueError) as e:
            raise DeserializationError(
                "Stored connector config is not valid JSON",
                cause=e,
                connector_id=record.id,
                connector_type=record.type,
            ) from e

        if not isinstance(document, dict):
            raise DeserializationError(
                "Stored connector config is not a JSON object",
                connector_id=record.id,
                connector_type=record.type,
            )

        # The row's primary key is authoritative for the ID
        document["id"] = record.id
        try:
            return config_class.model_validate(document)
        except PydanticValidationError as e:
            raise DeserializationError(
                f"Stored connector config does not match type {record.type}",
                cause=e,
                connector_id=record.id,
                connector_type=record.type,
            ) from e

    def all(self) -> List[ConnectorConfig]:
        """
        Every stored connector configuration.

        Raises:
            UnknownTypeError: If any row's type is not registered
            DeserializationError: If any row's document is invalid
        """
        with self._session_operation("all") as session:
            records = session.scalars(select(ConnectorConfigRecord)).all()
            return [self._to_config(record) for record in records]

    def get(self, connector_id: str, tx: Optional[Session] = None) -> ConnectorConfig:
        """
        Fetch one connector configuration.

        Raises:
            NotFoundError: If no connector has the ID
            UnknownTypeError: If the row's type is not registered
            DeserializationError: If the row's document is invalid
        """
        with self._session_operation("get", tx, entity_id=connector_id) as session:
            record = session.get(ConnectorConfigRecord, connector_id)
            if record is None:
                raise not_found(self.resource_name, connector_id=connector_id)
            return self._to_config(record)

    def set(self, configs: Iterable[ConnectorConfig]) -> None:
        """
        Replace every stored connector configuration.

        All configs are serialized before the table is touched. The delete and
        the inserts share one transaction, so a failure leaves the previous
        set in place.

        Raises:
            UnknownTypeError: If a config's class is not registered
            AlreadyExistsError: If two configs share an ID
            StorageError: On any other database failure
        """
        records = [self._to_record(config) for config in configs]

        with self._transaction("set") as session:
            session.execute(delete(ConnectorConfigRecord))
            session.add_all(records)

        self.logger.info(
            "Replaced connector configs",
            extra={"count": len(records), "connector_ids": [record.id for record in records]},
        )
