"""
Configuration for reconciling and highlighting a manifest session.

All tunables live in a single frozen ViewerConfig. The defaults match the
CloudWatch Logs Insights export of the MediaTailor ManifestService log group:

    fields @timestamp, eventType, responseBody
    | filter sessionId = 'xxxx-xxxx-xxxx'
    | sort @timestamp asc
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import timedelta
from typing import Any


# Event type values that carry a manifest body
ORIGIN_MANIFEST = "ORIGIN_MANIFEST"
GENERATED_MANIFEST = "GENERATED_MANIFEST"

# Field names used by the Logs Insights export
TIMESTAMP_FIELD = "@timestamp"
EVENT_TYPE_FIELD = "eventType"
BODY_FIELD = "responseBody"

# Minimal markup used to flag changes in display text
OPEN_MARKER = "<b>"
CLOSE_MARKER = "</b>"

# Two events of opposite kind closer than this may be swapped
DEFAULT_SWAP_WINDOW_MS = 100

# Number of flushed snapshots before highlighting starts
DEFAULT_HIGHLIGHT_AFTER = 2


@dataclass(frozen=True)
class ViewerConfig:
    """Settings shared by the loader, reconciler and highlighter.

    Attributes:
        swap_window: Maximum timestamp gap for the local swap heuristic.
        highlight_after: Snapshots flushed before diffs are computed.
        origin_event: eventType value of origin manifest records.
        generated_event: eventType value of generated manifest records.
        timestamp_field: Record field holding the event timestamp.
        event_type_field: Record field holding the event type.
        body_field: Record field holding the manifest text.
        open_marker: Markup inserted before highlighted text.
        close_marker: Markup inserted after highlighted text.
    """

    swap_window: timedelta = timedelta(milliseconds=DEFAULT_SWAP_WINDOW_MS)
    highlight_after: int = DEFAULT_HIGHLIGHT_AFTER
    origin_event: str = ORIGIN_MANIFEST
    generated_event: str = GENERATED_MANIFEST
    timestamp_field: str = TIMESTAMP_FIELD
    event_type_field: str = EVENT_TYPE_FIELD
    body_field: str = BODY_FIELD
    open_marker: str = OPEN_MARKER
    close_marker: str = CLOSE_MARKER

    def with_overrides(self, **overrides: Any) -> ViewerConfig:
        """Return a copy with the non-None overrides applied.

        ``swap_window_ms`` is accepted as a convenience for command line
        flags and converted to ``swap_window``.

        Examples:
            >>> ViewerConfig().with_overrides(swap_window_ms=250).swap_window
            datetime.timedelta(microseconds=250000)
        """
        changes = {key: value for key, value in overrides.items() if value is not None}
        window_ms = changes.pop("swap_window_ms", None)
        if window_ms is not None:
            if window_ms < 0:
                raise ValueError(f"swap window must be non-negative (got {window_ms})")
            changes["swap_window"] = timedelta(milliseconds=window_ms)
        return replace(self, **changes)


DEFAULT_CONFIG = ViewerConfig()
