"""
JSON serialization of structured values embedded as a single form field.
"""
import base64
import json
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from encoder.errors import SerializationError
from encoder.fields import is_aggregate, iter_json_fields
from encoder.kinds import BYTES_TYPES, is_collection
from encoder.refs import is_reference, unwrap


def _default(value: Any) -> Any:
    if is_reference(value):
        return unwrap(value)
    if is_aggregate(value):
        return dict(iter_json_fields(value))
    if isinstance(value, Mapping):
        return dict(value)
    if is_collection(value):
        return list(value)
    if isinstance(value, BYTES_TYPES):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, Decimal):
        return float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def serialize(value: Any) -> bytes:
    """
    Encode an aggregate, mapping or collection of them as compact JSON.

    Raises:
        SerializationError: If any nested value cannot be represented
    """
    try:
        text = json.dumps(
            value,
            default=_default,
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        )
    except (TypeError, ValueError) as e:
        raise SerializationError(f"json: {e}") from e
    return text.encode("utf-8")
