"""Utility modules for the identity store."""

from .logger import (
    AzureQueueHandler,
    ContextAwareLogger,
    CorrelationIdFilter,
    configure_logging,
    get_logger,
)
from .metadata_utils import deserialize_metadata, serialize_metadata
from .password_utils import PasswordHasher, hash_secret, verify_secret
from .secret_utils import MAX_SECRET_LENGTH, decode_secret, encode_secret, generate_secret

__all__ = [
    # Logging utilities
    "AzureQueueHandler",
    "ContextAwareLogger",
    "CorrelationIdFilter",
    "configure_logging",
    "get_logger",
    # Secret handling
    "MAX_SECRET_LENGTH",
    "decode_secret",
    "encode_secret",
    "generate_secret",
    "PasswordHasher",
    "hash_secret",
    "verify_secret",
    # Metadata mapping
    "serialize_metadata",
    "deserialize_metadata",
]
