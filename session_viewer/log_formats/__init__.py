"""
Log export formats for manifest session logs.

This module provides a unified interface for loading exported log records
from JSON, JSON Lines and Parquet files, and for normalizing the different
CloudWatch export shapes into flat records.

Usage:
    from session_viewer.log_formats import get_loader, normalize_record

    # Auto-detect format and get appropriate loader
    loader = get_loader("logs-insights-results.json")
    for record in loader.load("logs-insights-results.json"):
        flat = normalize_record(record)
        print(flat["eventType"])
"""

from session_viewer.log_formats.base import DataLoader
from session_viewer.log_formats.format_detector import (
    EXTENSION_MAP,
    SUPPORTED_FORMATS,
    detect_format,
    get_loader,
    get_loader_for_format,
)
from session_viewer.log_formats.json_loader import JSONLoader
from session_viewer.log_formats.jsonl_loader import JSONLLoader
from session_viewer.log_formats.parquet_loader import ParquetLoader
from session_viewer.log_formats.record_normalizer import (
    normalize_record,
)

__all__ = [
    # Base class
    "DataLoader",
    # Format detection
    "detect_format",
    "get_loader",
    "get_loader_for_format",
    "EXTENSION_MAP",
    "SUPPORTED_FORMATS",
    # Record normalization
    "normalize_record",
    # Loaders
    "JSONLLoader",
    "JSONLoader",
    "ParquetLoader",
]
