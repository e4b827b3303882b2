"""
JSON format log loader.

This module provides the JSONLoader class for the two JSON shapes that
CloudWatch produces for a Logs Insights query:

- Console export: an array of flat objects
- ``aws logs get-query-results`` output: an object whose ``results`` key
  holds an array of rows, each row an array of field/value cells
"""

from __future__ import annotations

import json
from typing import Any, Iterator

from session_viewer.log_formats.base import DataLoader, LogRecord


# Key holding the rows in get-query-results output
RESULTS_KEY = "results"


class JSONLoader(DataLoader):
    """Data loader for JSON log exports.

    A single flat object is treated as a list with one record.

    Attributes:
        format_name: Returns 'json'.
        supported_extensions: Returns ['.json'].
    """

    @property
    def format_name(self) -> str:
        """Return the format name."""
        return "json"

    @property
    def supported_extensions(self) -> list[str]:
        """Return supported file extensions."""
        return [".json"]

    def _load_json_data(self, filename: str) -> list[LogRecord]:
        """Load a JSON export and return its records.

        Args:
            filename: Path to the JSON file.

        Returns:
            A list of records (objects or field/value rows).

        Raises:
            FileNotFoundError: If the file does not exist.
            json.JSONDecodeError: If the file contains invalid JSON.
            ValueError: If the JSON is not an object or array of records.
        """
        with open(filename, "r", encoding="utf-8") as f:
            data: Any = json.load(f)

        if isinstance(data, dict):
            if isinstance(data.get(RESULTS_KEY), list):
                data = data[RESULTS_KEY]
            else:
                return [data]

        if isinstance(data, list):
            for i, item in enumerate(data):
                if not isinstance(item, (dict, list)):
                    raise ValueError(
                        f"JSON array item at index {i} is not a log record (got {type(item).__name__})"
                    )
            return data

        raise ValueError(
            f"JSON file must contain an object or array of log records (got {type(data).__name__})"
        )

    def load(self, filename: str) -> Iterator[LogRecord]:
        """Load records from a JSON export.

        The whole file is parsed at once; records are then yielded one at a
        time.

        Examples:
            >>> loader = JSONLoader()
            >>> for record in loader.load("logs-insights-results.json"):
            ...     print(record["eventType"])
        """
        yield from self._load_json_data(filename)

    def get_record_count(self, filename: str) -> int:
        """Get total number of records (parses the entire file)."""
        return len(self._load_json_data(filename))
