"""
Client credential store.

Issues client credentials, stores only the bcrypt hash of each secret, and
authenticates presented credentials. The plaintext secret is observable once,
in the value returned by ``create``.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..constants import SecretLimits
from ..db.db_client_models import ClientIdentity
from ..db.db_config import DatabaseManager
from ..db.db_errors import AlreadyExistsClassifier
from ..exceptions import DecodeError, ErrorCode, ValidationError, not_found, validation_failed
from ..schemas.client_schemas import Client, ClientCredentials
from ..utils.metadata_utils import deserialize_metadata, serialize_metadata
from ..utils.password_utils import PasswordHasher
from ..utils.secret_utils import decode_secret, encode_secret, generate_secret
from .base_repository import BaseRepository

SecretGenerator = Callable[[], bytes]


class ClientRepository(BaseRepository[ClientIdentity]):
    """Repository for the client_identity table."""

    resource_name = "Client"

    def __init__(
        self,
        db_manager: DatabaseManager,
        classifier: Optional[AlreadyExistsClassifier] = None,
        secret_generator: SecretGenerator = generate_secret,
        hasher: Optional[PasswordHasher] = None,
    ):
        super().__init__(db_manager, ClientIdentity, classifier)
        self.secret_generator = secret_generator
        self.hasher = hasher or PasswordHasher()

    @classmethod
    def from_clients(
        cls, db_manager: DatabaseManager, clients: Iterable[Client], **kwargs: Any
    ) -> "ClientRepository":
        """Build a repository and seed it with clients that carry their own secrets."""
        repository = cls(db_manager, **kwargs)
        repository.create_batch(clients)
        return repository

    # ==================== ROW MAPPING ====================

    def _to_model(self, client: Client) -> ClientIdentity:
        """Hash the client's encoded secret and build its row."""
        client_id = client.credentials.id
        if not client_id:
            raise validation_failed("id", "client ID is required")

        if not client.credentials.has_secret:
            raise validation_failed("secret", "client has no secret", client_id=client_id)

        raw = decode_secret(client.credentials.secret)
        if len(raw) > SecretLimits.MAX_SECRET_LENGTH:
            raise ValidationError(
                "Secret exceeds maximum length",
                field="secret",
                error_code=ErrorCode.LENGTH_EXCEEDED,
                client_id=client_id,
                max_length=SecretLimits.MAX_SECRET_LENGTH,
            )

        return ClientIdentity(
            id=client_id,
            secret=self.hasher.hash(raw),
            client_metadata=serialize_metadata(client.metadata),
            dex_admin=client.admin,
        )

    @staticmethod
    def _to_client(model: ClientIdentity) -> Client:
        # The hash never leaves the repository
        return Client(
            credentials=ClientCredentials(id=model.id),
            metadata=deserialize_metadata(model.client_metadata),
            admin=bool(model.dex_admin),
        )

    # ==================== WRITES ====================

    def create(self, client: Client, tx: Optional[Session] = None) -> ClientCredentials:
        """
        Issue credentials for a new client.

        A client without a secret is given a freshly generated one. The
        returned credentials hold the encoded secret; this is the only time
        it can be read back.

        Args:
            client: Client to register
            tx: Optional borrowed session; the caller commits it, or rolls it
                back if this raises

        Returns:
            Client ID and encoded secret

        Raises:
            ValidationError: If the ID is empty or the secret is too long
            DecodeError: If a supplied secret is not URL-safe base64
            AlreadyExistsError: If the client ID is taken
            StorageError: On any other database failure
        """
        secret = client.credentials.secret
        if not secret:
            secret = encode_secret(self.secret_generator())
            client = client.model_copy(
                update={"credentials": ClientCredentials(id=client.credentials.id, secret=secret)}
            )

        model = self._to_model(client)

        with self._transaction("create", tx, entity_id=model.id) as session:
            session.add(model)

        self.logger.info(
            "Issued client credentials", extra={"client_id": model.id, "admin": model.dex_admin}
        )
        return ClientCredentials(id=model.id, secret=secret)

    def create_batch(self, clients: Iterable[Client]) -> None:
        """
        Store several clients in one all-or-nothing transaction.

        Every client must carry its own secret.

        Raises:
            ValidationError: If any client lacks a secret or has an invalid one
            AlreadyExistsError: If any client ID is taken or repeated
            StorageError: On any other database failure
        """
        clients = list(clients)
        with self._transaction("create_batch") as session:
            for client in clients:
                session.add(self._to_model(client))
                # Flush per row so a duplicate is attributed to its client
                session.flush()

        self.logger.info("Seeded clients", extra={"count": len(clients)})

    def set_admin(self, client_id: str, is_admin: bool) -> None:
        """
        Grant or revoke administrative privileges.

        Raises:
            NotFoundError: If the client does not exist; nothing is written
        """
        with self._transaction("set_admin", entity_id=client_id) as session:
            model = session.get(ClientIdentity, client_id)
            if model is None:
                raise not_found(self.resource_name, client_id=client_id)
            model.dex_admin = is_admin

        self.logger.info(
            "Updated client admin flag", extra={"client_id": client_id, "admin": is_admin}
        )

    # ==================== READS ====================

    def get(self, client_id: str, tx: Optional[Session] = None) -> Client:
        """
        Fetch a client without its secret.

        Raises:
            NotFoundError: If the client does not exist
            DeserializationError: If the stored metadata is corrupt
        """
        with self._session_operation("get", tx, entity_id=client_id) as session:
            model = session.get(ClientIdentity, client_id)
            if model is None:
                raise not_found(self.resource_name, client_id=client_id)
            return self._to_client(model)

    def metadata(self, client_id: str, tx: Optional[Session] = None) -> Dict[str, Any]:
        """Metadata document of a client."""
        return self.get(client_id, tx).metadata

    def is_admin(self, client_id: str) -> bool:
        """Whether the client has administrative privileges; False for unknown clients."""
        with self._session_operation("is_admin", entity_id=client_id) as session:
            model = session.get(ClientIdentity, client_id)
            return bool(model.dex_admin) if model is not None else False

    def all(self, tx: Optional[Session] = None) -> List[Client]:
        """
        Every registered client, in no particular order.

        Raises:
            DeserializationError: If any row's metadata is corrupt
        """
        with self._session_operation("all", tx) as session:
            models = session.scalars(select(ClientIdentity)).all()
            return [self._to_client(model) for model in models]

    def authenticate(self, credentials: ClientCredentials, tx: Optional[Session] = None) -> bool:
        """
        Check presented credentials.

        Unknown clients, secrets that do not decode, oversized secrets and
        wrong secrets all give False so callers cannot tell them apart.

        Raises:
            StorageError: If the database lookup fails
        """
        with self._session_operation("authenticate", tx, entity_id=credentials.id) as session:
            model = session.get(ClientIdentity, credentials.id)
            hashed = model.secret if model is not None else None

        if hashed is None:
            self.logger.debug("Authentication for unknown client", extra={"client_id": credentials.id})
            return False

        try:
            raw = decode_secret(credentials.secret or "")
        except DecodeError:
            # TODO(security review): decide whether malformed secrets should stay indistinguishable
            self.logger.warning(
                "Rejected undecodable client secret", extra={"client_id": credentials.id}
            )
            return False

        if len(raw) > SecretLimits.MAX_SECRET_LENGTH:
            return False

        return self.hasher.verify(hashed, raw)
