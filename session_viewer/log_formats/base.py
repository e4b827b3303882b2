"""
Abstract base class for log export loaders.

This module defines the DataLoader interface that all format-specific
loaders must implement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Iterator


# A raw exported record: a flat object, or a get-query-results row of cells
LogRecord = Any


class DataLoader(ABC):
    """Abstract base class for loading exported log records.

    All format-specific loaders (JSON, JSONL, Parquet) inherit from this
    class. Loaders only read records; normalization and validation happen
    later in the session pipeline.
    """

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Return the format name (e.g., 'jsonl', 'json', 'parquet')."""
        pass

    @property
    @abstractmethod
    def supported_extensions(self) -> list[str]:
        """Return supported file extensions (e.g., ['.jsonl'])."""
        pass

    @abstractmethod
    def load(self, filename: str) -> Iterator[LogRecord]:
        """Lazily load records from file.

        Args:
            filename: Path to the file.

        Yields:
            Each exported log record.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file format is invalid.
        """
        pass

    @abstractmethod
    def get_record_count(self, filename: str) -> int:
        """Get total number of records.

        Args:
            filename: Path to the file.

        Returns:
            The total number of records in the file.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        pass

    def load_all(
        self,
        filename: str,
        max_records: int | None = None,
        progress_callback: Callable[[int, int | None], None] | None = None,
    ) -> list[LogRecord]:
        """Load all records from file into memory.

        Args:
            filename: Path to the file.
            max_records: Maximum number of records to load (None = all).
            progress_callback: Optional callback(loaded_count, total_count) for
                              progress updates. total_count may be None if unknown.

        Returns:
            A list of all records.
        """
        records: list[LogRecord] = []

        for i, record in enumerate(self.load(filename)):
            if max_records is not None and i >= max_records:
                break
            records.append(record)
            if progress_callback is not None and i % 1000 == 0:
                progress_callback(i + 1, None)

        if progress_callback is not None:
            progress_callback(len(records), len(records))

        return records
