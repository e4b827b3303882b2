"""
Parquet format log loader.

This module provides the ParquetLoader class for log exports stored as
Apache Parquet, such as CloudWatch log data exported to S3 and rewritten by
Athena or a Glue job. Timestamp columns arrive as Python datetimes and are
passed through unchanged; the session pipeline accepts them as is.
"""

from __future__ import annotations

from typing import Any, Iterator

import pyarrow.parquet as pq

from session_viewer.log_formats.base import DataLoader, LogRecord


def _convert_nested_to_python(value: Any) -> Any:
    """Recursively convert PyArrow scalars and nested values to Python types."""
    if value is None:
        return None

    if hasattr(value, "as_py"):
        return value.as_py()

    if isinstance(value, list):
        return [_convert_nested_to_python(item) for item in value]

    if isinstance(value, dict):
        return {k: _convert_nested_to_python(v) for k, v in value.items()}

    return value


class ParquetLoader(DataLoader):
    """Data loader for Parquet log exports.

    Attributes:
        format_name: Returns 'parquet'.
        supported_extensions: Returns ['.parquet', '.pq'].
    """

    @property
    def format_name(self) -> str:
        """Return the format name."""
        return "parquet"

    @property
    def supported_extensions(self) -> list[str]:
        """Return supported file extensions."""
        return [".parquet", ".pq"]

    def load(self, filename: str) -> Iterator[LogRecord]:
        """Lazily load records from a Parquet file, one batch at a time.

        Raises:
            FileNotFoundError: If the file does not exist.
            pyarrow.ArrowInvalid: If the file is not a valid Parquet file.

        Examples:
            >>> loader = ParquetLoader()
            >>> for record in loader.load("manifest-logs.parquet"):
            ...     print(record["eventType"])
        """
        parquet_file = pq.ParquetFile(filename)

        for batch in parquet_file.iter_batches():
            batch_dict = batch.to_pydict()
            num_rows = len(next(iter(batch_dict.values()))) if batch_dict else 0

            for i in range(num_rows):
                yield {
                    key: _convert_nested_to_python(values[i])
                    for key, values in batch_dict.items()
                }

    def get_record_count(self, filename: str) -> int:
        """Get the row count from Parquet metadata without reading data."""
        parquet_file = pq.ParquetFile(filename)
        return parquet_file.metadata.num_rows
