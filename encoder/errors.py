"""
Exceptions raised while encoding values into multipart/form-data parts.
"""
from typing import Optional


class MultipartEncoderError(Exception):
    """Base class for every encoder failure.

    The rendered message always carries the library prefix, and the names of
    the fields the error passed through on its way out of the encoder.
    """

    prefix = "multipartencoder"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.field: Optional[str] = None

    def add_field(self, fieldname: str) -> "MultipartEncoderError":
        """Prepend the enclosing field name to the message."""
        self.message = f'field "{fieldname}": {self.message}'
        if self.field is None:
            self.field = fieldname
        self.args = (self.message,)
        return self

    def __str__(self) -> str:
        return f"{self.prefix}: {self.message}"


class UsageError(MultipartEncoderError):
    """The caller passed a value the encoder cannot traverse."""


class UnsupportedTypeError(MultipartEncoderError, TypeError):
    """No encoding strategy exists for the value's type."""


class FileError(MultipartEncoderError):
    """A file-like value has no usable metadata or is a directory."""


class WriteError(MultipartEncoderError):
    """The form writer or its underlying sink failed."""


class SerializationError(MultipartEncoderError):
    """A structured value could not be serialized to JSON."""
