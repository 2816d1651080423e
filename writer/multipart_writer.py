"""
Streaming multipart/form-data writer.

Parts are written to the underlying binary stream as soon as they are
created; only the most recently created part accepts data.
"""
import logging
import re
from typing import BinaryIO, Optional

from urllib3.fields import RequestField
from urllib3.filepost import choose_boundary

logger = logging.getLogger(__name__)

# RFC 2046 boundary characters
BOUNDARY_PATTERN = re.compile(r"[0-9A-Za-z'()+_,\-./:=? ]{0,69}[0-9A-Za-z'()+_,\-./:=?]")

FILE_CONTENT_TYPE = "application/octet-stream"


class PartWriter:
    """Byte sink for the body of a single part."""

    def __init__(self, writer: "MultipartWriter", name: str):
        self._writer = writer
        self.name = name
        self.size = 0

    def write(self, data: bytes) -> int:
        if self._writer.closed or self._writer.current_part is not self:
            raise ValueError(f'multipart: can\'t write to finished part "{self.name}"')
        written = self._writer._write(data)
        self.size += written
        return written


class MultipartWriter:
    """Writes multipart/form-data parts to a binary stream."""

    def __init__(self, stream: BinaryIO, boundary: Optional[str] = None):
        """
        Initialize writer.

        Args:
            stream: Binary stream receiving the encoded body
            boundary: Part boundary; a random one is chosen when omitted
        """
        if boundary is None:
            boundary = choose_boundary()
        elif not BOUNDARY_PATTERN.fullmatch(boundary):
            raise ValueError(f"multipart: invalid boundary {boundary!r}")

        self._stream = stream
        self._boundary = boundary
        self.current_part: Optional[PartWriter] = None
        self.parts_written = 0
        self.closed = False

    @property
    def boundary(self) -> str:
        return self._boundary

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self._boundary}"

    def _write(self, data: bytes) -> int:
        self._stream.write(data)
        return len(data)

    def create_part(self, name: str, field: RequestField) -> PartWriter:
        """
        Start a new part described by ``field``'s headers.

        The previous part, if any, is finished and no longer writable.
        """
        if self.closed:
            raise ValueError("multipart: writer is closed")

        delimiter = f"--{self._boundary}\r\n"
        if self.current_part is not None:
            delimiter = "\r\n" + delimiter
        self._write(delimiter.encode("ascii") + field.render_headers().encode("utf-8"))

        part = PartWriter(self, name)
        self.current_part = part
        self.parts_written += 1
        logger.debug(f"Started part {part.name}")
        return part

    def create_form_field(self, name: str) -> PartWriter:
        field = RequestField(name=name, data=b"")
        field.make_multipart(content_disposition="form-data")
        return self.create_part(name, field)

    def create_form_file(self, fieldname: str, filename: str) -> PartWriter:
        field = RequestField(name=fieldname, data=b"", filename=filename)
        field.make_multipart(content_disposition="form-data", content_type=FILE_CONTENT_TYPE)
        return self.create_part(fieldname, field)

    def close(self):
        """Write the closing boundary. Further parts cannot be created."""
        if self.closed:
            return
        trailer = f"--{self._boundary}--\r\n"
        if self.current_part is not None:
            trailer = "\r\n" + trailer
        self._write(trailer.encode("ascii"))
        self.closed = True
        logger.debug(f"Closed multipart body after {self.parts_written} parts")

    def __enter__(self) -> "MultipartWriter":
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.close()
