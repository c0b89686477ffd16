"""
Unit tests for secret encoding, decoding and generation.
"""

import base64

import pytest

from identity_store.exceptions import DecodeError, ErrorCode, ValidationError
from identity_store.utils.secret_utils import (
    MAX_SECRET_LENGTH,
    decode_secret,
    encode_secret,
    generate_secret,
)


class TestEncodeSecret:
    def test_uses_url_safe_alphabet(self):
        raw = b"\xfb\xff\xfe" * 4

        encoded = encode_secret(raw)

        assert "+" not in encoded
        assert "/" not in encoded
        assert encoded == base64.urlsafe_b64encode(raw).decode("ascii")

    def test_keeps_padding(self):
        assert encode_secret(b"ab") == "YWI="

    def test_decode_reverses_encode(self):
        raw = generate_secret()

        assert decode_secret(encode_secret(raw)) == raw


class TestDecodeSecret:
    def test_decodes_url_safe_characters(self):
        assert decode_secret("-_-_") == b"\xfb\xff\xbf"

    @pytest.mark.parametrize("text", ["+/+/", "ab/c", "a+bc"])
    def test_rejects_standard_alphabet(self, text):
        with pytest.raises(DecodeError):
            decode_secret(text)

    @pytest.mark.parametrize("text", ["abc", "a", "!!!!", "YWI=YWI=x", "ab cd==="])
    def test_rejects_malformed_text(self, text):
        with pytest.raises(DecodeError):
            decode_secret(text)

    def test_decode_error_is_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            decode_secret("!!!!")

        assert exc_info.value.error_code == ErrorCode.INVALID_FORMAT
        assert exc_info.value.status_code == 400

    def test_error_does_not_echo_the_input(self):
        with pytest.raises(DecodeError) as exc_info:
            decode_secret("s3cr3t!value")

        assert exc_info.value.cause is None
        assert "s3cr3t" not in str(exc_info.value)
        assert "s3cr3t" not in str(exc_info.value.context)

    def test_empty_text_decodes_to_empty_bytes(self):
        assert decode_secret("") == b""


class TestGenerateSecret:
    def test_generates_maximum_length(self):
        assert len(generate_secret()) == MAX_SECRET_LENGTH == 72

    def test_generates_distinct_secrets(self):
        assert len({generate_secret() for _ in range(20)}) == 20
