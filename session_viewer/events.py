"""
Raw log events and their deterministic ordering.

Log records are validated and converted into immutable RawEvent values
before any reconciliation happens, so a malformed export is rejected as a
whole instead of producing a partial session.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable

from session_viewer.config import DEFAULT_CONFIG, ViewerConfig
from session_viewer.errors import MalformedInputError
from session_viewer.snapshot import Side

logger = logging.getLogger(__name__)


class EventKind(Enum):
    """Event type discriminator of a log record."""

    ORIGIN_MANIFEST = "origin"
    GENERATED_MANIFEST = "generated"
    OTHER = "other"

    @property
    def side(self) -> Side | None:
        """Snapshot side this kind fills, or None for non-manifest events."""
        if self is EventKind.ORIGIN_MANIFEST:
            return Side.ORIGIN
        if self is EventKind.GENERATED_MANIFEST:
            return Side.GENERATED
        return None

    @property
    def is_manifest(self) -> bool:
        return self is not EventKind.OTHER

    def opposite(self) -> EventKind:
        """Return the other manifest kind (OTHER has no opposite)."""
        if self is EventKind.ORIGIN_MANIFEST:
            return EventKind.GENERATED_MANIFEST
        if self is EventKind.GENERATED_MANIFEST:
            return EventKind.ORIGIN_MANIFEST
        raise ValueError("OTHER events have no opposite kind")


# Tie-break rank for events sharing a timestamp
_KIND_RANK = {
    EventKind.ORIGIN_MANIFEST: 0,
    EventKind.GENERATED_MANIFEST: 1,
    EventKind.OTHER: 2,
}


@dataclass(frozen=True)
class RawEvent:
    """A single timestamped log event.

    Attributes:
        timestamp: Timezone-aware event time.
        kind: Which feed the event belongs to.
        body: Raw manifest text ("" for events without a body).
    """

    timestamp: datetime
    kind: EventKind
    body: str = ""

    @property
    def line_count(self) -> int:
        return len(self.body.split("\n"))


def parse_timestamp(value: Any) -> datetime:
    """Parse a log timestamp into a timezone-aware datetime.

    Accepts ISO 8601 strings (with ``T`` or a space separator, as written
    by Logs Insights), epoch milliseconds as int/float/digit string, and
    datetime objects. Naive values are taken to be UTC.

    Raises:
        ValueError: If the value cannot be interpreted as a timestamp.

    Examples:
        >>> parse_timestamp("2023-08-01 12:00:00.250")
        datetime.datetime(2023, 8, 1, 12, 0, 0, 250000, tzinfo=datetime.timezone.utc)
        >>> parse_timestamp(0).year
        1970
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, bool):
        raise ValueError(f"Invalid timestamp: {value!r}")
    elif isinstance(value, (int, float)):
        parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    elif isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            parsed = datetime.fromtimestamp(int(text) / 1000, tz=timezone.utc)
        else:
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            try:
                parsed = datetime.fromisoformat(text)
            except ValueError:
                raise ValueError(f"Invalid timestamp: {value!r}") from None
    else:
        raise ValueError(f"Invalid timestamp type: {type(value).__name__}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def classify_event_type(event_type: str, config: ViewerConfig = DEFAULT_CONFIG) -> EventKind:
    """Map an eventType value to an EventKind."""
    if event_type == config.origin_event:
        return EventKind.ORIGIN_MANIFEST
    if event_type == config.generated_event:
        return EventKind.GENERATED_MANIFEST
    return EventKind.OTHER


def event_from_record(
    record: dict[str, Any],
    index: int = 0,
    config: ViewerConfig = DEFAULT_CONFIG,
) -> RawEvent:
    """Convert one flat log record into a RawEvent.

    Manifest events must carry a string body. Other events may omit it.

    Raises:
        MalformedInputError: If a required field is missing or invalid.
    """
    if not isinstance(record, dict):
        raise MalformedInputError(
            f"expected an object, got {type(record).__name__}", index
        )

    if config.timestamp_field not in record:
        raise MalformedInputError(f"missing '{config.timestamp_field}' field", index)
    if config.event_type_field not in record:
        raise MalformedInputError(f"missing '{config.event_type_field}' field", index)

    try:
        timestamp = parse_timestamp(record[config.timestamp_field])
    except ValueError as e:
        raise MalformedInputError(str(e), index) from e

    event_type = record[config.event_type_field]
    if not isinstance(event_type, str):
        raise MalformedInputError(
            f"'{config.event_type_field}' must be a string (got {type(event_type).__name__})",
            index,
        )

    kind = classify_event_type(event_type, config)
    body = record.get(config.body_field)
    if kind.is_manifest:
        if not isinstance(body, str):
            raise MalformedInputError(
                f"{event_type} record has no '{config.body_field}' text", index
            )
    elif not isinstance(body, str):
        body = ""

    return RawEvent(timestamp=timestamp, kind=kind, body=body)


def events_from_records(
    records: Iterable[dict[str, Any]],
    config: ViewerConfig = DEFAULT_CONFIG,
) -> list[RawEvent]:
    """Validate and convert every record, failing on the first bad one.

    Raises:
        MalformedInputError: If the input is not a list of valid records.
    """
    if isinstance(records, (str, bytes, dict)):
        raise MalformedInputError(
            f"expected a sequence of records, got {type(records).__name__}"
        )
    events = [
        event_from_record(record, index, config) for index, record in enumerate(records)
    ]
    logger.debug("Converted %d records into events", len(events))
    return events


def event_sort_key(event: RawEvent) -> tuple[datetime, int]:
    """Sort key: timestamp first, then origin before generated."""
    return (event.timestamp, _KIND_RANK[event.kind])


def sort_events(events: Iterable[RawEvent]) -> list[RawEvent]:
    """Return events ordered by timestamp with a deterministic tie-break.

    Events sharing a timestamp are ordered ORIGIN_MANIFEST, then
    GENERATED_MANIFEST, then everything else. Events of the same kind and
    timestamp keep their input order. The input is not modified.
    """
    return sorted(events, key=event_sort_key)
