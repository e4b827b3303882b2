"""
JSONL format log loader.

This module provides the JSONLLoader class for JSON Lines files, the shape
written when log events are streamed out one per line (for example by
``aws logs filter-log-events`` piped through ``jq -c``).
"""

from __future__ import annotations

import json
from typing import Iterator

from session_viewer.log_formats.base import DataLoader, LogRecord


class JSONLLoader(DataLoader):
    """Data loader for JSONL (JSON Lines) log exports.

    Blank lines are skipped.

    Attributes:
        format_name: Returns 'jsonl'.
        supported_extensions: Returns ['.jsonl', '.ndjson'].
    """

    @property
    def format_name(self) -> str:
        """Return the format name."""
        return "jsonl"

    @property
    def supported_extensions(self) -> list[str]:
        """Return supported file extensions."""
        return [".jsonl", ".ndjson"]

    def load(self, filename: str) -> Iterator[LogRecord]:
        """Lazily load records from a JSONL file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If a line contains invalid JSON, with its line number.
        """
        with open(filename, "r", encoding="utf-8") as f:
            for line_number, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    yield json.loads(line)
                except json.JSONDecodeError as e:
                    raise ValueError(f"Invalid JSON on line {line_number}: {e.msg}") from e

    def get_record_count(self, filename: str) -> int:
        """Count non-empty lines without decoding them."""
        count = 0
        with open(filename, "r", encoding="utf-8") as f:
            for line in f:
                if line.strip():
                    count += 1
        return count
