"""
Detection and streaming of file-like values.

A value is treated as a file when it can be read and can describe itself:
either through a ``stat()`` method returning ``FileInfo`` (see ``Statable``)
or, for regular file objects, through ``fileno()`` and ``name``.
"""
import logging
import os
import stat as stat_mode
from typing import Any, NamedTuple, Protocol, runtime_checkable

from encoder.errors import FileError, WriteError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


class FileInfo(NamedTuple):
    name: str
    size: int
    is_dir: bool


@runtime_checkable
class Statable(Protocol):
    def read(self, size: int = -1) -> bytes: ...

    def stat(self) -> FileInfo: ...


def is_file(value: Any) -> bool:
    if isinstance(value, type):
        return False
    if not callable(getattr(value, "read", None)):
        return False
    return callable(getattr(value, "stat", None)) or callable(getattr(value, "fileno", None))


def file_info(value: Any) -> FileInfo:
    """
    Collect the name, size and directory flag of a file-like value.

    Raises:
        FileError: If the metadata cannot be retrieved
    """
    try:
        if callable(getattr(value, "stat", None)):
            info = value.stat()
            return FileInfo(info.name, info.size, info.is_dir)
        st = os.fstat(value.fileno())
        return FileInfo(os.path.basename(value.name), st.st_size, stat_mode.S_ISDIR(st.st_mode))
    except Exception as e:
        raise FileError(f'file in "{type(value).__name__}" is not available') from e


def copy_stream(source: Any, sink: Any, chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
    """Copy everything left in ``source`` into ``sink``, returning the byte count."""
    copied = 0
    try:
        while True:
            chunk = source.read(chunk_size)
            if not chunk:
                break
            if isinstance(chunk, str):
                chunk = chunk.encode("utf-8")
            sink.write(chunk)
            copied += len(chunk)
    except (OSError, ValueError) as e:
        raise WriteError(str(e)) from e
    return copied


def stream_file(writer: Any, value: Any, fieldname: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
    """
    Write a file-like value as a file part.

    Args:
        writer: Form writer providing ``create_form_file``
        value: File-like value to read from
        fieldname: Form field name; the file's own name is used when empty
        chunk_size: Bytes read per iteration

    Returns:
        Number of bytes copied

    Raises:
        FileError: If metadata is unavailable or the file is a directory
        WriteError: If reading the file or writing the part fails
    """
    info = file_info(value)
    if info.is_dir:
        raise FileError(f"{info.name} is dir")

    if not fieldname:
        fieldname = info.name

    try:
        sink = writer.create_form_file(fieldname, info.name)
    except (OSError, ValueError) as e:
        raise WriteError(str(e)) from e

    copied = copy_stream(value, sink, chunk_size)
    logger.debug(f"Copied {copied} bytes of {info.name} into file part {fieldname}")
    return copied
