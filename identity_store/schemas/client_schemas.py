"""
Pydantic schemas for registered clients and their credentials.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ClientCredentials(BaseModel):
    """Client ID plus the URL-safe base64 encoded secret."""

    id: str = Field(..., description="Client ID")
    # Excluded from repr so credentials never leak into logs
    secret: Optional[str] = Field(default=None, repr=False, description="Encoded client secret")

    @property
    def has_secret(self) -> bool:
        return bool(self.secret)


class Client(BaseModel):
    """A registered client as issued and returned by the client repository."""

    credentials: ClientCredentials = Field(..., description="Client ID and optional secret")
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Client metadata document (redirect URIs, display name, ...)",
    )
    admin: bool = Field(default=False, description="Grants administrative privileges")

    @property
    def id(self) -> str:
        return self.credentials.id
