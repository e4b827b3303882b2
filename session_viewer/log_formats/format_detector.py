"""
Format detection utilities for log export files.

This module provides functions to detect the format of an exported log file
and get the appropriate loader.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from session_viewer.log_formats.base import DataLoader


# Mapping of file extensions to format names
EXTENSION_MAP: dict[str, str] = {
    ".jsonl": "jsonl",
    ".ndjson": "jsonl",
    ".json": "json",
    ".parquet": "parquet",
    ".pq": "parquet",
}

# Supported format names
SUPPORTED_FORMATS = frozenset(["jsonl", "json", "parquet"])


def detect_format(filename: str) -> str:
    """Detect file format from extension or content.

    Files without a known extension are sniffed: Parquet magic bytes first,
    then the first non-whitespace character (``[`` for a JSON array, ``{``
    for JSON Lines, unless the whole file is a single JSON object).

    Args:
        filename: Path to the file.

    Returns:
        Format name: "jsonl", "json", or "parquet"

    Raises:
        ValueError: If the format cannot be determined.

    Examples:
        >>> detect_format("logs-insights-results.json")
        'json'
        >>> detect_format("events.ndjson")
        'jsonl'
    """
    extension = Path(filename).suffix.lower()

    if extension in EXTENSION_MAP:
        return EXTENSION_MAP[extension]

    path = Path(filename)
    if path.exists():
        try:
            with open(filename, "rb") as f:
                if f.read(4) == b"PAR1":
                    return "parquet"
        except OSError:
            pass

        try:
            with open(filename, "r", encoding="utf-8") as f:
                head = f.read(4096)
        except (OSError, UnicodeDecodeError):
            head = ""

        stripped = head.lstrip()
        if stripped.startswith("["):
            return "json"
        if stripped.startswith("{"):
            # A pretty-printed get-query-results object spans many lines
            first_line = stripped.split("\n", 1)[0].strip()
            return "jsonl" if first_line.endswith("}") else "json"

    raise ValueError(
        f"Cannot determine format for '{filename}'. "
        f"Supported extensions: {', '.join(sorted(EXTENSION_MAP.keys()))}"
    )


def get_loader_for_format(format_name: str) -> "DataLoader":
    """Get a loader for a specific format name.

    Raises:
        ValueError: If the format name is not supported.

    Examples:
        >>> get_loader_for_format("parquet").format_name
        'parquet'
    """
    # Import loaders here to avoid circular imports
    from session_viewer.log_formats.json_loader import JSONLoader
    from session_viewer.log_formats.jsonl_loader import JSONLLoader
    from session_viewer.log_formats.parquet_loader import ParquetLoader

    if format_name not in SUPPORTED_FORMATS:
        raise ValueError(
            f"Unsupported format '{format_name}'. "
            f"Supported formats: {', '.join(sorted(SUPPORTED_FORMATS))}"
        )

    loaders: dict[str, DataLoader] = {
        "jsonl": JSONLLoader(),
        "json": JSONLoader(),
        "parquet": ParquetLoader(),
    }
    return loaders[format_name]


def get_loader(filename: str) -> "DataLoader":
    """Factory function to get the appropriate loader for a file.

    Raises:
        ValueError: If the format cannot be determined.
    """
    return get_loader_for_format(detect_format(filename))
