"""
Encoder that writes aggregates, mappings and single values as
multipart/form-data parts.

Field values are dispatched on their runtime category:

- collections of aggregates or mappings become one JSON field
- other collections are written element by element under "<name>[]"
- file-like values are streamed into a file part
- aggregates and mappings become one JSON field
- everything else is formatted as a scalar text field

``None`` and empty references are skipped without producing a part.
"""
import io
import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

import config
from encoder.errors import MultipartEncoderError, UnsupportedTypeError, UsageError, WriteError
from encoder.fields import iter_form_fields
from encoder.files import is_file, stream_file
from encoder.kinds import STRUCTURED, Kind, deep_kind, kind_of
from encoder.objects import serialize
from encoder.refs import unwrap
from encoder.scalars import format_scalar
from writer.multipart_writer import MultipartWriter

logger = logging.getLogger(__name__)


class Strategy(Enum):
    SCALAR = "scalar"
    OBJECT = "object"
    ARRAY = "array"
    FILE = "file"


def select_strategy(value: Any, collapse_structured_arrays: bool = True) -> Strategy:
    """
    Pick the encoding strategy for a concrete (already unwrapped) value.

    Collections whose deep category is an aggregate or mapping are collapsed
    into a single JSON field unless ``collapse_structured_arrays`` is off.
    """
    kind = kind_of(value)
    if kind is Kind.COLLECTION:
        if collapse_structured_arrays and deep_kind(value) in STRUCTURED:
            return Strategy.OBJECT
        return Strategy.ARRAY
    if is_file(value):
        return Strategy.FILE
    if kind in STRUCTURED:
        return Strategy.OBJECT
    return Strategy.SCALAR


class Encoder:
    """Layer on top of a multipart writer for automatic value encoding.

    An encoder wraps exactly one writer and must not be shared between
    threads. Opening and closing the writer, and any file-like values being
    encoded, is left to the caller.
    """

    def __init__(
        self,
        writer: Any,
        collapse_structured_arrays: bool = config.COLLAPSE_STRUCTURED_ARRAYS,
        chunk_size: int = config.COPY_CHUNK_SIZE
    ):
        """
        Initialize encoder.

        Args:
            writer: Form writer exposing create_form_field/create_form_file
            collapse_structured_arrays: Send collections of objects as one JSON field
            chunk_size: Bytes read per iteration when streaming files
        """
        self.writer = writer
        self.collapse_structured_arrays = collapse_structured_arrays
        self.chunk_size = chunk_size
        self._encoders: Dict[Strategy, Callable[[Any, str], None]] = {
            Strategy.SCALAR: self._encode_scalar,
            Strategy.OBJECT: self._encode_object,
            Strategy.ARRAY: self._encode_array,
            Strategy.FILE: self._encode_file,
        }

    def encode(self, value: Any):
        """
        Encode the fields of an aggregate or the entries of a mapping.

        Raises:
            UsageError: If the value is neither an aggregate nor a mapping,
                or a mapping key is not a string
            MultipartEncoderError: On the first field that fails to encode
        """
        if value is None:
            raise UsageError("value is not valid")

        target = unwrap(value)
        kind = kind_of(target)
        if kind is Kind.AGGREGATE:
            self._encode_aggregate(target)
        elif kind is Kind.MAPPING:
            self._encode_mapping(target)
        else:
            raise UsageError("only a mapping or aggregate can be encoded")

    def encode_field(self, value: Any, fieldname: str):
        """Encode a single value of any supported kind under ``fieldname``."""
        self._encode_field(value, fieldname)

    def _encode_aggregate(self, value: Any):
        for name, item in iter_form_fields(value):
            self._encode_field(item, name)

    def _encode_mapping(self, value: Mapping):
        for key, item in value.items():
            if not isinstance(key, str):
                raise UsageError("only a string must be a key")
            self._encode_field(item, key)

    def _encode_field(self, value: Any, fieldname: str):
        value = unwrap(value)
        if value is None:
            logger.debug(f"Skipping empty field {fieldname}")
            return

        strategy = select_strategy(value, self.collapse_structured_arrays)
        try:
            self._encoders[strategy](value, fieldname)
        except MultipartEncoderError as e:
            raise e.add_field(fieldname)

    def _encode_array(self, value: Any, fieldname: str):
        items = [unwrap(item) for item in value]
        items = [item for item in items if item is not None]
        if not items:
            return

        # Strategy of the first element applies to the whole collection
        strategy = select_strategy(items[0], self.collapse_structured_arrays)
        efunc = self._encoders[strategy]
        for item in items:
            if strategy is Strategy.ARRAY and kind_of(item) is not Kind.COLLECTION:
                raise UnsupportedTypeError(f"{type(item).__name__} is not a supported type")
            efunc(item, f"{fieldname}[]")

    def _encode_file(self, value: Any, fieldname: str):
        stream_file(self.writer, value, fieldname, self.chunk_size)

    def _encode_object(self, value: Any, fieldname: str):
        self._write_field(fieldname, serialize(value))

    def _encode_scalar(self, value: Any, fieldname: str):
        self._write_field(fieldname, format_scalar(value))

    def _write_field(self, fieldname: str, data: bytes):
        try:
            sink = self.writer.create_form_field(fieldname)
            sink.write(data)
        except (OSError, ValueError) as e:
            raise WriteError(str(e)) from e
        logger.debug(f"Wrote field {fieldname} ({len(data)} bytes)")


def encode(value: Any, boundary: Optional[str] = None, **options: Any) -> Tuple[bytes, str]:
    """
    Encode an aggregate or mapping into a complete multipart body.

    Args:
        value: Aggregate or mapping to encode
        boundary: Part boundary; random when omitted
        **options: Passed to ``Encoder``

    Returns:
        Tuple of (body, content type)
    """
    buffer = io.BytesIO()
    with MultipartWriter(buffer, boundary=boundary) as writer:
        Encoder(writer, **options).encode(value)
    return buffer.getvalue(), writer.content_type


def encode_field(value: Any, fieldname: str, boundary: Optional[str] = None, **options: Any) -> Tuple[bytes, str]:
    """Encode a single value into a complete multipart body."""
    buffer = io.BytesIO()
    with MultipartWriter(buffer, boundary=boundary) as writer:
        Encoder(writer, **options).encode_field(value, fieldname)
    return buffer.getvalue(), writer.content_type
