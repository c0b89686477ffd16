"""
Mapping between client metadata documents and their stored text form.
"""

import json
from typing import Any, Dict, Mapping

from ..exceptions import DeserializationError, ValidationError
from .json_utils import loads


def serialize_metadata(metadata: Mapping[str, Any]) -> str:
    """
    Serialize a metadata document to JSON text.

    Raises:
        ValidationError: If the document is not a mapping or holds values
            that have no JSON representation
    """
    if not isinstance(metadata, Mapping):
        raise ValidationError(
            "Client metadata must be a mapping",
            field="metadata",
            actual_type=type(metadata).__name__,
        )
    try:
        # No custom encoder: anything JSON cannot hold would not round-trip.
        return json.dumps(dict(metadata), allow_nan=False, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise ValidationError(
            "Client metadata is not JSON serializable", field="metadata", cause=e
        ) from e


def deserialize_metadata(text: str) -> Dict[str, Any]:
    """
    Parse stored metadata text back into a document.

    Raises:
        DeserializationError: If the text is not JSON or not a JSON object
    """
    try:
        metadata = loads(text)
    except (TypeError, ValueError) as e:
        raise DeserializationError("Stored client metadata is not valid JSON", cause=e) from e

    if not isinstance(metadata, dict):
        raise DeserializationError(
            "Stored client metadata is not a JSON object",
            actual_type=type(metadata).__name__,
        )
    return metadata
