"""Shared test fixtures for the multipart encoder tests."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest
from requests_toolbelt.multipart.decoder import MultipartDecoder

from encoder.form_encoder import Encoder
from writer.multipart_writer import MultipartWriter

TEST_BOUNDARY = "test-boundary-1234"
FILE_CONTENT = b"Yasha and Masha are my lovest cats\n" * 8


@dataclass
class RecordedPart:
    name: str
    filename: Optional[str] = None
    data: bytearray = field(default_factory=bytearray)

    def write(self, chunk: bytes) -> int:
        self.data.extend(chunk)
        return len(chunk)

    @property
    def text(self) -> str:
        return bytes(self.data).decode("utf-8")


class RecordingWriter:
    """Form writer double keeping every created part in order."""

    def __init__(self) -> None:
        self.parts: List[RecordedPart] = []

    def create_form_field(self, name: str) -> RecordedPart:
        part = RecordedPart(name)
        self.parts.append(part)
        return part

    def create_form_file(self, fieldname: str, filename: str) -> RecordedPart:
        part = RecordedPart(fieldname, filename)
        self.parts.append(part)
        return part

    def names(self) -> List[str]:
        return [p.name for p in self.parts]

    def values(self, name: str) -> List[str]:
        return [p.text for p in self.parts if p.name == name]


def decode_form(body: bytes, content_type: str) -> List[Tuple[Dict[str, str], bytes]]:
    """Parse a multipart body into (disposition params, content) pairs."""
    parts = []
    for part in MultipartDecoder(body, content_type).parts:
        header = part.headers[b"Content-Disposition"].decode("utf-8")
        params = {}
        for item in header.split(";")[1:]:
            key, _, value = item.strip().partition("=")
            params[key] = value.strip('"')
        parts.append((params, part.content))
    return parts


@pytest.fixture
def recorder() -> RecordingWriter:
    """Return an empty recording writer."""
    return RecordingWriter()


@pytest.fixture
def encoder(recorder: RecordingWriter) -> Encoder:
    """Return an encoder wired to the recording writer."""
    return Encoder(recorder, collapse_structured_arrays=True, chunk_size=16)


@pytest.fixture
def stream() -> io.BytesIO:
    return io.BytesIO()


@pytest.fixture
def multipart_writer(stream: io.BytesIO) -> MultipartWriter:
    """Return a real writer with a fixed boundary."""
    return MultipartWriter(stream, boundary=TEST_BOUNDARY)


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    """Create a small file on disk."""
    path = tmp_path / "file1"
    path.write_bytes(FILE_CONTENT)
    return path
