"""Unit tests for the streaming multipart writer."""

from __future__ import annotations

import io

import pytest

from conftest import TEST_BOUNDARY, decode_form
from writer.multipart_writer import BOUNDARY_PATTERN, MultipartWriter

pytestmark = pytest.mark.unit


class TestMultipartWriter:
    """Tests for MultipartWriter."""

    def test_single_field_layout(self, multipart_writer: MultipartWriter, stream: io.BytesIO) -> None:
        """Test the exact bytes of a one-field body."""
        multipart_writer.create_form_field("a").write(b"hello")
        multipart_writer.close()
        assert stream.getvalue() == (
            b"--test-boundary-1234\r\n"
            b'Content-Disposition: form-data; name="a"\r\n'
            b"\r\n"
            b"hello"
            b"\r\n--test-boundary-1234--\r\n"
        )

    def test_file_part_headers(self, multipart_writer: MultipartWriter, stream: io.BytesIO) -> None:
        multipart_writer.create_form_file("doc", "report.pdf").write(b"%PDF")
        multipart_writer.close()
        body = stream.getvalue()
        assert b'Content-Disposition: form-data; name="doc"; filename="report.pdf"\r\n' in body
        assert b"Content-Type: application/octet-stream\r\n" in body

    def test_parts_decode(self, multipart_writer: MultipartWriter, stream: io.BytesIO) -> None:
        multipart_writer.create_form_field("a").write(b"1")
        sink = multipart_writer.create_form_field("b")
        sink.write(b"2")
        sink.write(b"3")
        multipart_writer.close()

        parts = decode_form(stream.getvalue(), multipart_writer.content_type)
        assert [(p["name"], c) for p, c in parts] == [("a", b"1"), ("b", b"23")]
        assert multipart_writer.parts_written == 2
        assert sink.size == 2

    def test_empty_body(self, multipart_writer: MultipartWriter, stream: io.BytesIO) -> None:
        multipart_writer.close()
        assert stream.getvalue() == b"--test-boundary-1234--\r\n"

    def test_close_is_idempotent(self, multipart_writer: MultipartWriter, stream: io.BytesIO) -> None:
        multipart_writer.close()
        multipart_writer.close()
        assert stream.getvalue().count(b"--test-boundary-1234--") == 1

    def test_finished_part_rejects_writes(self, multipart_writer: MultipartWriter) -> None:
        """Test that only the latest part accepts data."""
        first = multipart_writer.create_form_field("a")
        multipart_writer.create_form_field("b")
        with pytest.raises(ValueError):
            first.write(b"late")

    def test_closed_writer_rejects_parts(self, multipart_writer: MultipartWriter) -> None:
        sink = multipart_writer.create_form_field("a")
        multipart_writer.close()
        with pytest.raises(ValueError):
            multipart_writer.create_form_field("b")
        with pytest.raises(ValueError):
            sink.write(b"x")

    def test_context_manager_closes(self, stream: io.BytesIO) -> None:
        with MultipartWriter(stream, boundary=TEST_BOUNDARY) as writer:
            writer.create_form_field("a").write(b"1")
        assert writer.closed
        assert stream.getvalue().endswith(b"--test-boundary-1234--\r\n")

    def test_context_manager_leaves_failed_body_open(self, stream: io.BytesIO) -> None:
        with pytest.raises(RuntimeError):
            with MultipartWriter(stream, boundary=TEST_BOUNDARY) as writer:
                raise RuntimeError("boom")
        assert not writer.closed


class TestBoundary:
    def test_random_boundary_is_valid(self) -> None:
        writer = MultipartWriter(io.BytesIO())
        assert BOUNDARY_PATTERN.fullmatch(writer.boundary)
        assert writer.content_type == f"multipart/form-data; boundary={writer.boundary}"

    @pytest.mark.parametrize("boundary", ["", "x" * 71, "bad\nboundary", "ends with space "])
    def test_invalid_boundary(self, boundary: str) -> None:
        with pytest.raises(ValueError):
            MultipartWriter(io.BytesIO(), boundary=boundary)
