"""
Runtime category queries used by the encoder.
"""
import numbers
from collections.abc import Mapping, Sequence
from decimal import Decimal
from enum import Enum
from typing import Any

from encoder.fields import is_aggregate
from encoder.refs import is_reference, unwrap

BYTES_TYPES = (bytes, bytearray, memoryview)


class Kind(Enum):
    NIL = "nil"
    REFERENCE = "reference"
    BOOL = "bool"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    BYTES = "bytes"
    AGGREGATE = "aggregate"
    MAPPING = "mapping"
    COLLECTION = "collection"
    OTHER = "other"


STRUCTURED = (Kind.AGGREGATE, Kind.MAPPING)


def is_collection(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str,) + BYTES_TYPES)


def kind_of(value: Any) -> Kind:
    if value is None:
        return Kind.NIL
    if is_reference(value):
        return Kind.REFERENCE
    # bool is an Integral, check it first
    if isinstance(value, bool):
        return Kind.BOOL
    if isinstance(value, numbers.Integral):
        return Kind.INTEGER
    if isinstance(value, (numbers.Real, Decimal)):
        return Kind.FLOAT
    if isinstance(value, str):
        return Kind.STRING
    if isinstance(value, BYTES_TYPES):
        return Kind.BYTES
    if is_aggregate(value):
        return Kind.AGGREGATE
    if isinstance(value, Mapping):
        return Kind.MAPPING
    if is_collection(value):
        return Kind.COLLECTION
    return Kind.OTHER


def deep_kind(value: Any) -> Kind:
    """
    Break through references and collections to the innermost category.

    Collections are probed through their first present element: empty
    references and empty inner collections are passed over. A collection
    with no present element reports ``Kind.COLLECTION``.
    """
    kind = kind_of(value)
    if kind is Kind.REFERENCE:
        return deep_kind(unwrap(value))
    if kind is not Kind.COLLECTION:
        return kind

    for item in value:
        item_kind = deep_kind(item)
        if item_kind not in (Kind.NIL, Kind.COLLECTION):
            return item_kind
    return Kind.COLLECTION
