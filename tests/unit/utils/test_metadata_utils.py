"""
Unit tests for client metadata serialization.
"""

import pytest

from identity_store.exceptions import DeserializationError, ValidationError
from identity_store.utils.metadata_utils import deserialize_metadata, serialize_metadata


class TestSerializeMetadata:
    def test_compact_json(self):
        assert serialize_metadata({"a": 1, "b": [True, None]}) == '{"a":1,"b":[true,null]}'

    def test_round_trip(self):
        metadata = {
            "redirect_uris": ["https://app.example.com/callback"],
            "client_name": "Example",
            "logo": {"url": "https://app.example.com/logo.png", "width": 64},
            "scopes": [],
            "ratio": 0.5,
        }

        assert deserialize_metadata(serialize_metadata(metadata)) == metadata

    def test_empty_mapping(self):
        assert deserialize_metadata(serialize_metadata({})) == {}

    def test_rejects_non_mapping(self):
        with pytest.raises(ValidationError) as exc_info:
            serialize_metadata(["not", "a", "mapping"])

        assert exc_info.value.context["actual_type"] == "list"

    @pytest.mark.parametrize("value", [{1, 2}, b"bytes", float("nan"), object()])
    def test_rejects_values_without_json_form(self, value):
        with pytest.raises(ValidationError):
            serialize_metadata({"value": value})


class TestDeserializeMetadata:
    def test_invalid_json(self):
        with pytest.raises(DeserializationError):
            deserialize_metadata("{not json")

    @pytest.mark.parametrize("text", ["[1, 2]", '"text"', "42", "null"])
    def test_non_object_json(self, text):
        with pytest.raises(DeserializationError):
            deserialize_metadata(text)
