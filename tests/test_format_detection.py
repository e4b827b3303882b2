"""Tests for format detection in session_viewer/log_formats/format_detector.py."""

from __future__ import annotations

import pyarrow as pa
import pyarrow.parquet as pq
import pytest

from session_viewer.log_formats import (
    EXTENSION_MAP,
    SUPPORTED_FORMATS,
    JSONLLoader,
    JSONLoader,
    ParquetLoader,
    detect_format,
    get_loader,
    get_loader_for_format,
)


class TestDetectFormatByExtension:
    """Tests for extension based detection."""

    @pytest.mark.parametrize(
        "filename,expected",
        [
            ("logs.json", "json"),
            ("logs.JSON", "json"),
            ("events.jsonl", "jsonl"),
            ("events.ndjson", "jsonl"),
            ("logs.parquet", "parquet"),
            ("logs.pq", "parquet"),
        ],
    )
    def test_known_extensions(self, filename, expected):
        assert detect_format(filename) == expected

    def test_extension_map_covers_supported_formats(self):
        assert set(EXTENSION_MAP.values()) == SUPPORTED_FORMATS


class TestDetectFormatByContent:
    """Tests for content sniffing of files without a known extension."""

    def test_json_array(self, tmp_path):
        path = tmp_path / "export"
        path.write_text('[{"eventType": "ORIGIN_MANIFEST"}]')
        assert detect_format(str(path)) == "json"

    def test_json_lines(self, tmp_path):
        path = tmp_path / "export"
        path.write_text('{"a": 1}\n{"a": 2}\n')
        assert detect_format(str(path)) == "jsonl"

    def test_pretty_printed_object(self, tmp_path):
        """Multi-line get-query-results output is JSON, not JSONL."""
        path = tmp_path / "export"
        path.write_text('{\n  "results": []\n}\n')
        assert detect_format(str(path)) == "json"

    def test_parquet_magic(self, tmp_path):
        path = tmp_path / "export"
        pq.write_table(pa.table({"a": [1]}), str(path))
        assert detect_format(str(path)) == "parquet"

    def test_unknown(self, tmp_path):
        path = tmp_path / "export.txt"
        path.write_text("not structured")
        with pytest.raises(ValueError, match="Cannot determine format"):
            detect_format(str(path))

    def test_missing_file_without_extension(self):
        with pytest.raises(ValueError):
            detect_format("/nonexistent/export")


class TestGetLoader:
    """Tests for loader factories."""

    def test_loader_types(self):
        assert isinstance(get_loader("a.json"), JSONLoader)
        assert isinstance(get_loader("a.ndjson"), JSONLLoader)
        assert isinstance(get_loader("a.parquet"), ParquetLoader)

    def test_loader_for_format(self):
        assert get_loader_for_format("jsonl").format_name == "jsonl"

    def test_unsupported_format(self):
        with pytest.raises(ValueError, match="Unsupported format"):
            get_loader_for_format("csv")
