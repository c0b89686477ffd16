"""
Row shape of the client_identity table.

Just the data structure; hashing and metadata mapping live in the utils and
the client repository.
"""

from sqlalchemy import Boolean, Column, LargeBinary, String, Text

from ..constants import TableName
from .db_config import Base


class ClientIdentity(Base):
    """One registered client and the bcrypt hash of its secret."""

    __tablename__ = TableName.CLIENT_IDENTITY.value

    id = Column(String(255), primary_key=True)
    secret = Column(LargeBinary, nullable=False)
    # "metadata" is reserved on declarative classes, so the attribute differs from the column
    client_metadata = Column("metadata", Text, nullable=False)
    dex_admin = Column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"ClientIdentity(id={self.id!r}, dex_admin={self.dex_admin!r})"
