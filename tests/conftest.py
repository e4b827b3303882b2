"""Pytest configuration and shared fixtures for session viewer tests."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

from session_viewer.events import EventKind, RawEvent

BASE_TIME = datetime(2023, 8, 1, 12, 0, 0, tzinfo=timezone.utc)


def at(ms: int) -> datetime:
    """Return BASE_TIME shifted by ``ms`` milliseconds."""
    return BASE_TIME + timedelta(milliseconds=ms)


def media_playlist(
    first: int,
    last: int,
    media_sequence: int | None = None,
    discontinuity_sequence: int | None = None,
    prefix: str = "seg",
) -> str:
    """Build a media playlist with segments ``first``..``last`` inclusive.

    The media sequence defaults to ``first`` so segment numbers line up
    with their media sequence numbers.
    """
    sequence = first if media_sequence is None else media_sequence
    lines = [
        "#EXTM3U",
        "#EXT-X-VERSION:3",
        "#EXT-X-TARGETDURATION:6",
        f"#EXT-X-MEDIA-SEQUENCE:{sequence}",
    ]
    if discontinuity_sequence is not None:
        lines.append(f"#EXT-X-DISCONTINUITY-SEQUENCE:{discontinuity_sequence}")
    for number in range(first, last + 1):
        lines.append("#EXTINF:6.0,")
        lines.append(f"{prefix}{number}.ts")
    return "\n".join(lines) + "\n"


MASTER_PLAYLIST = (
    "#EXTM3U\n"
    "#EXT-X-STREAM-INF:BANDWIDTH=1280000,RESOLUTION=640x360\n"
    "low/index.m3u8\n"
    "#EXT-X-STREAM-INF:BANDWIDTH=2560000,RESOLUTION=1280x720\n"
    "high/index.m3u8\n"
)


def origin(ms: int, body: str = "O") -> RawEvent:
    return RawEvent(timestamp=at(ms), kind=EventKind.ORIGIN_MANIFEST, body=body)


def generated(ms: int, body: str = "G") -> RawEvent:
    return RawEvent(timestamp=at(ms), kind=EventKind.GENERATED_MANIFEST, body=body)


def other(ms: int) -> RawEvent:
    return RawEvent(timestamp=at(ms), kind=EventKind.OTHER)


def log_record(ms: int, event_type: str, body: str | None = None) -> dict[str, Any]:
    """Build a flat Logs Insights style record."""
    record: dict[str, Any] = {
        "@timestamp": at(ms).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3],
        "eventType": event_type,
    }
    if body is not None:
        record["responseBody"] = body
    return record


def write_json(path: Path, data: Any) -> None:
    """Write data as a JSON file."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f)


def write_jsonl(path: Path, records: list[Any]) -> None:
    """Write records to a JSONL file."""
    with open(path, "w", encoding="utf-8") as f:
        for record in records:
            f.write(json.dumps(record) + "\n")


@pytest.fixture
def session_records() -> list[dict[str, Any]]:
    """Three paired polls of a live playlist sliding forward, out of order."""
    return [
        log_record(2000, "GENERATED_MANIFEST", media_playlist(1, 5, prefix="ad")),
        log_record(0, "ORIGIN_MANIFEST", media_playlist(1, 3)),
        log_record(10, "GENERATED_MANIFEST", media_playlist(1, 3, prefix="ad")),
        log_record(500, "AD_MARKER_FOUND"),
        log_record(1000, "ORIGIN_MANIFEST", media_playlist(1, 4)),
        log_record(1010, "GENERATED_MANIFEST", media_playlist(1, 4, prefix="ad")),
        log_record(2000, "ORIGIN_MANIFEST", media_playlist(1, 5)),
    ]


@pytest.fixture
def session_file(tmp_path, session_records) -> Path:
    """A Logs Insights console export of ``session_records``."""
    path = tmp_path / "logs-insights-results.json"
    write_json(path, session_records)
    return path
