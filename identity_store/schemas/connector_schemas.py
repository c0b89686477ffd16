"""
Pydantic schemas for upstream identity connector configurations.

Each connector type has its own configuration shape, identified by a type
tag. The stored row carries the tag, and a ConnectorConfigRegistry maps the
tag back to the shape when the row is read.
"""

import threading
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_serializer, field_validator

from ..exceptions import UnknownTypeError, ValidationError


class ConnectorConfig(BaseModel):
    """Base schema for all connector configurations."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",
    )

    connector_type: ClassVar[str] = ""

    id: str = Field(..., min_length=1, description="Connector ID")

    def to_document(self) -> Dict[str, Any]:
        """Plain JSON-compatible form used for storage."""
        return self.model_dump(mode="json")


class LocalConnectorConfig(ConnectorConfig):
    """Users stored in the identity provider's own database."""

    connector_type: ClassVar[str] = "local"


class OIDCConnectorConfig(ConnectorConfig):
    """Upstream OpenID Connect provider."""

    connector_type: ClassVar[str] = "oidc"

    issuer_url: str = Field(..., min_length=1, description="Issuer URL of the upstream provider")
    client_id: str = Field(..., min_length=1, description="Client ID at the upstream provider")
    client_secret: SecretStr = Field(..., description="Client secret at the upstream provider")
    trusted_email_provider: bool = Field(
        default=False, description="Trust the email_verified claim from this provider"
    )
    email_claim: Optional[str] = Field(default=None, description="Claim to read the email from")

    @field_validator("issuer_url")
    @classmethod
    def validate_issuer_url(cls, v):
        """Issuer must be an http(s) URL."""
        if not v.startswith(("https://", "http://")):
            raise ValueError("Issuer URL must start with http:// or https://")
        return v

    @field_serializer("client_secret", when_used="json")
    def dump_client_secret(self, v: SecretStr) -> str:
        return v.get_secret_value()


class GitHubConnectorConfig(ConnectorConfig):
    """GitHub OAuth2 application."""

    connector_type: ClassVar[str] = "github"

    client_id: str = Field(..., min_length=1, description="GitHub OAuth client ID")
    client_secret: SecretStr = Field(..., description="GitHub OAuth client secret")
    api_url: str = Field(default="https://api.github.com", description="GitHub API URL")
    organizations: List[str] = Field(default_factory=list, description="Required memberships")

    @field_serializer("client_secret", when_used="json")
    def dump_client_secret(self, v: SecretStr) -> str:
        return v.get_secret_value()


class LDAPConnectorConfig(ConnectorConfig):
    """LDAP directory bound with a service account."""

    connector_type: ClassVar[str] = "ldap"

    server_host: str = Field(..., min_length=1, description="LDAP server host")
    server_port: int = Field(default=389, gt=0, le=65535, description="LDAP server port")
    use_tls: bool = Field(default=True, description="Use StartTLS")
    use_ssl: bool = Field(default=False, description="Use LDAPS")
    bind_template: str = Field(..., min_length=1, description="DN template for user binds")
    search_before_auth: bool = Field(default=False, description="Search for the DN before binding")
    search_filter: Optional[str] = Field(default=None, description="Filter used to find users")
    search_bind_dn: Optional[str] = Field(default=None, description="Service account DN")
    search_bind_password: Optional[SecretStr] = Field(default=None, description="Service account password")
    timeout_seconds: int = Field(default=60, gt=0, description="Network timeout in seconds")

    @field_validator("bind_template")
    @classmethod
    def validate_bind_template(cls, v):
        """The template must leave room for the user name."""
        if "%u" not in v and "%b" not in v:
            raise ValueError("Bind template must contain %u or %b")
        return v

    @field_serializer("search_bind_password", when_used="json")
    def dump_search_bind_password(self, v: Optional[SecretStr]) -> Optional[str]:
        return v.get_secret_value() if v is not None else None


class ConnectorConfigRegistry:
    """
    Closed mapping from connector type tag to configuration class.

    Connector implementations register their class once while the process is
    wired up. Resolving an unregistered tag raises UnknownTypeError.
    """

    def __init__(self):
        self._types: Dict[str, Type[ConnectorConfig]] = {}
        self._tags: Dict[Type[ConnectorConfig], str] = {}
        self._lock = threading.Lock()

    def register(
        self, config_class: Type[ConnectorConfig], type_tag: Optional[str] = None
    ) -> Type[ConnectorConfig]:
        """
        Register a configuration class under its type tag.

        Args:
            config_class: ConnectorConfig subclass
            type_tag: Tag to register under (default: the class's connector_type)

        Returns:
            The class, so this can be used as a decorator

        Raises:
            ValidationError: If the tag is empty or already registered
        """
        tag = type_tag or config_class.connector_type
        if not tag:
            raise ValidationError(
                f"{config_class.__name__} has no connector type", field="connector_type"
            )
        with self._lock:
            if tag in self._types:
                raise ValidationError(
                    f"Connector type already registered: {tag}",
                    field="connector_type",
                    connector_type=tag,
                )
            self._types[tag] = config_class
            # A class registered under several tags is stored under the first
            self._tags.setdefault(config_class, tag)
        return config_class

    def config_class_for(self, type_tag: str) -> Type[ConnectorConfig]:
        try:
            return self._types[type_tag]
        except KeyError:
            raise UnknownTypeError(type_tag) from None

    def new_config_for_type(self, type_tag: str, data: Mapping[str, Any]) -> ConnectorConfig:
        """
        Validate a document into the class registered for the tag.

        Raises:
            UnknownTypeError: If no class is registered for the tag
            pydantic.ValidationError: If the document does not fit the class
        """
        return self.config_class_for(type_tag).model_validate(data)

    def type_of(self, config: ConnectorConfig) -> str:
        """Tag a config is stored under; its class must be registered."""
        with self._lock:
            tag = self._tags.get(type(config))
        if tag is not None:
            return tag
        raise UnknownTypeError(type(config).connector_type or type(config).__name__)

    def types(self) -> List[str]:
        with self._lock:
            return sorted(self._types)

    def __contains__(self, type_tag: str) -> bool:
        return type_tag in self._types


BUILTIN_CONNECTOR_CONFIGS = (
    LocalConnectorConfig,
    OIDCConnectorConfig,
    GitHubConnectorConfig,
    LDAPConnectorConfig,
)


def default_connector_registry() -> ConnectorConfigRegistry:
    """Fresh registry holding the built-in connector types."""
    registry = ConnectorConfigRegistry()
    for config_class in BUILTIN_CONNECTOR_CONFIGS:
        registry.register(config_class)
    return registry
