"""Tests for the saved-body verification script."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from conftest import FILE_CONTENT
from encoder.form_encoder import encode
from verify_output import analyze_output, read_parts

pytestmark = pytest.mark.unit


@pytest.fixture
def saved_body(tmp_path: Path, sample_file: Path) -> Path:
    """Encode a form and save it the way main.py does."""
    output = tmp_path / "form.multipart"
    with open(sample_file, "rb") as f:
        body, content_type = encode({"title": "hello", "tags": ["a", "b"], "meta": {"k": 1}, "upload": f})
    output.write_bytes(body)
    output.with_suffix(".multipart.content-type").write_text(content_type, encoding="utf-8")
    return output


class TestReadParts:
    def test_reads_fields_and_files(self, saved_body: Path) -> None:
        parts = read_parts(saved_body)
        assert [p["name"] for p in parts] == ["title", "tags[]", "tags[]", "meta", "upload"]
        assert json.loads(parts[3]["content"]) == {"k": 1}
        assert parts[4]["filename"] == "file1"
        assert parts[4]["size"] == len(FILE_CONTENT)


class TestAnalyzeOutput:
    def test_prints_summary(self, saved_body: Path, capsys: pytest.CaptureFixture[str]) -> None:
        analyze_output(saved_body)
        out = capsys.readouterr().out
        assert "Total parts: 5" in out
        assert "tags[]: 2 value(s)" in out
        assert "upload: file1" in out

    def test_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        analyze_output(tmp_path / "missing")
        assert "Output file not found" in capsys.readouterr().out
