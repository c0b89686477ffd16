"""
Row shape of the connector_config table.
"""

from sqlalchemy import Column, String, Text

from ..constants import TableName
from .db_config import Base


class ConnectorConfigRecord(Base):
    """Serialized configuration of one upstream identity connector."""

    __tablename__ = TableName.CONNECTOR_CONFIG.value

    id = Column(String(255), primary_key=True)
    type = Column(String(100), nullable=False)
    config = Column(Text, nullable=False)
