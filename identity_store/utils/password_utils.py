"""
One-way hashing of client secrets with bcrypt.

bcrypt silently ignores everything past the first 72 bytes of its input, so
both hashing and verification check the length explicitly instead of letting
a forged secret sharing a 72-byte prefix through.
"""

from typing import Optional

import bcrypt

from ..config import get_config
from ..constants import SecretLimits
from ..exceptions import ErrorCode, HashingError, ValidationError


def hash_secret(raw: bytes, cost: int = SecretLimits.DEFAULT_BCRYPT_COST) -> bytes:
    """
    Hash raw secret bytes with a fresh salt.

    Args:
        raw: Secret bytes, at most 72 long
        cost: bcrypt work factor

    Returns:
        The bcrypt hash, including salt and cost

    Raises:
        ValidationError: If the secret is longer than 72 bytes
        HashingError: If bcrypt fails to produce a hash
    """
    if len(raw) > SecretLimits.MAX_SECRET_LENGTH:
        raise ValidationError(
            "Secret exceeds maximum length",
            field="secret",
            error_code=ErrorCode.LENGTH_EXCEEDED,
            max_length=SecretLimits.MAX_SECRET_LENGTH,
        )

    try:
        return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=cost))
    except (ValueError, TypeError, OSError) as e:
        raise HashingError(cause=e, cost=cost) from e


def verify_secret(hashed: bytes, raw: bytes) -> bool:
    """Constant-time check of raw secret bytes against a bcrypt hash."""
    if len(raw) > SecretLimits.MAX_SECRET_LENGTH:
        return False
    try:
        return bcrypt.checkpw(raw, hashed)
    except (ValueError, TypeError):
        return False


class PasswordHasher:
    """Hashes and verifies secrets with a fixed work factor."""

    def __init__(self, cost: Optional[int] = None):
        if cost is None:
            cost = get_config().security.bcrypt_cost
        if not SecretLimits.MIN_BCRYPT_COST <= cost <= SecretLimits.MAX_BCRYPT_COST:
            raise ValidationError(
                f"bcrypt cost must be between {SecretLimits.MIN_BCRYPT_COST} "
                f"and {SecretLimits.MAX_BCRYPT_COST}",
                field="cost",
            )
        self.cost = cost

    def hash(self, raw: bytes) -> bytes:
        return hash_secret(raw, self.cost)

    def verify(self, hashed: bytes, raw: bytes) -> bool:
        return verify_secret(hashed, raw)
