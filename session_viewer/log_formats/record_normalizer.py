"""
Record normalization for exported CloudWatch log records.

Manifest logs reach this tool in a few shapes depending on how they were
exported. They are all normalized to the flat shape produced by the Logs
Insights console export:

    {"@timestamp": "...", "eventType": "...", "responseBody": "..."}

Supported Shapes:
    - Flat Logs Insights console export (returned as a copy)
    - ``aws logs get-query-results`` rows: a list of
      ``{"field": name, "value": value}`` cells
    - Raw log events carrying the MediaTailor JSON payload in ``@message``
      (as a JSON string or an already decoded object)
    - snake_case field names (``timestamp``, ``event_type``, ``response_body``)
"""

from __future__ import annotations

import json
from typing import Any

from session_viewer.config import DEFAULT_CONFIG, ViewerConfig


MESSAGE_FIELD = "@message"

# Alternative spellings found in re-exported logs. MediaTailor writes its
# own event time as eventTimestamp inside the payload.
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "timestamp": ("timestamp", "eventTimestamp"),
    "event_type": ("event_type", "type"),
    "body": ("response_body", "body"),
}


def _cells_to_dict(cells: list[Any]) -> dict[str, Any] | list[Any]:
    """Convert a get-query-results row into a flat dict.

    Returns the list unchanged if it is not made of field/value cells, so
    validation can report it.
    """
    if not cells or not all(
        isinstance(cell, dict) and "field" in cell for cell in cells
    ):
        return cells
    return {cell["field"]: cell.get("value") for cell in cells}


def _decode_message(message: Any) -> dict[str, Any]:
    if isinstance(message, dict):
        return message
    if isinstance(message, str):
        try:
            decoded = json.loads(message)
        except json.JSONDecodeError:
            return {}
        if isinstance(decoded, dict):
            return decoded
    return {}


def normalize_record(record: Any, config: ViewerConfig = DEFAULT_CONFIG) -> Any:
    """Normalize a record to the flat timestamp/eventType/body shape.

    Args:
        record: One exported log record.
        config: Provides the target field names.

    Returns:
        A normalized copy of the record. Values that are neither dicts nor
        field/value rows are returned unchanged and rejected later by
        validation.

    Examples:
        >>> row = [{"field": "@timestamp", "value": "2023-08-01 12:00:00.000"},
        ...        {"field": "eventType", "value": "ORIGIN_MANIFEST"}]
        >>> normalize_record(row)["eventType"]
        'ORIGIN_MANIFEST'
    """
    if isinstance(record, list):
        record = _cells_to_dict(record)
    if not isinstance(record, dict):
        return record

    normalized = record.copy()

    # Payload fields fill in whatever the outer record does not carry
    if MESSAGE_FIELD in normalized:
        payload = _decode_message(normalized[MESSAGE_FIELD])
        for key, value in payload.items():
            normalized.setdefault(key, value)

    targets = {
        "timestamp": config.timestamp_field,
        "event_type": config.event_type_field,
        "body": config.body_field,
    }
    for role, target in targets.items():
        if target in normalized:
            continue
        for alias in FIELD_ALIASES[role]:
            if alias in normalized:
                normalized[target] = normalized[alias]
                break

    return normalized
