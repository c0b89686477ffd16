"""
Client secret encoding and generation.

Secrets cross the store boundary as URL-safe base64 text and are handled as
raw bytes everywhere else.
"""

import base64
import binascii
import secrets

from ..constants import SecretLimits
from ..exceptions import DecodeError

MAX_SECRET_LENGTH = SecretLimits.MAX_SECRET_LENGTH


def encode_secret(raw: bytes) -> str:
    """Encode raw secret bytes as padded URL-safe base64 text."""
    return base64.urlsafe_b64encode(raw).decode("ascii")


def decode_secret(text: str) -> bytes:
    """
    Decode URL-safe base64 text back into raw secret bytes.

    Decoding is strict: characters outside the URL-safe alphabet and
    incorrect padding are rejected rather than skipped.

    Raises:
        DecodeError: If the text is not valid URL-safe base64
    """
    if isinstance(text, str) and ("+" in text or "/" in text):
        raise DecodeError(reason="standard alphabet")
    try:
        return base64.b64decode(text, altchars=b"-_", validate=True)
    except (binascii.Error, ValueError, TypeError) as e:
        # The cause is left out: its message can echo part of the secret.
        raise DecodeError(reason=type(e).__name__) from None


def generate_secret() -> bytes:
    """Generate a fresh random secret of the maximum usable length."""
    return secrets.token_bytes(SecretLimits.GENERATED_SECRET_LENGTH)
