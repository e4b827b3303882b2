"""
Diff highlighting between two consecutive playlists of the same role.

The diff is structural rather than textual: segments are compared by media
sequence number, so a playlist that slid forward by two segments gets its
two trailing segments wrapped in bold markers, and counter rebases on the
EXT-X-MEDIA-SEQUENCE and EXT-X-DISCONTINUITY-SEQUENCE directives are
flagged by wrapping the new value.

Segment Delta Policy:
    - delta <= 0 (segments removed, or sequence numbers reset): no segment
      is highlighted
    - delta > segment count: every segment is highlighted
    - previous playlist without segments: every current segment is new
    - current playlist without segments: nothing to highlight
"""

from __future__ import annotations

import re
from typing import assert_never

from session_viewer.config import CLOSE_MARKER, OPEN_MARKER
from session_viewer.playlist_codec import (
    DISCONTINUITY_SEQUENCE_TAG,
    MEDIA_SEQUENCE_TAG,
    MasterPlaylist,
    MediaPlaylist,
    ParsedPlaylist,
    SegmentInfo,
    serialize,
)


def count_new_segments(previous: MediaPlaylist, current: MediaPlaylist) -> int:
    """Return how many trailing segments of ``current`` are new.

    Computed from the last media sequence numbers of both playlists and
    clamped to ``[0, len(current.segments)]``.

    Examples:
        Previous segments 1-3, current segments 1-5 gives 2.
    """
    current_last = current.last_segment
    if current_last is None:
        return 0
    previous_last = previous.last_segment
    if previous_last is None:
        return len(current.segments)

    delta = current_last.media_sequence_number - previous_last.media_sequence_number
    return max(0, min(delta, len(current.segments)))


def _wrap_directive(text: str, tag: str, value: int, open_marker: str, close_marker: str) -> str:
    pattern = re.compile(rf"^{re.escape(tag)}{value}$", re.MULTILINE)
    return pattern.sub(lambda _: f"{tag}{open_marker}{value}{close_marker}", text, count=1)


def highlight_media(
    previous: MediaPlaylist,
    current: MediaPlaylist,
    open_marker: str = OPEN_MARKER,
    close_marker: str = CLOSE_MARKER,
) -> str:
    """Serialize ``current`` with its changes relative to ``previous`` marked."""
    segment_count = len(current.segments)
    first_new = segment_count - count_new_segments(previous, current)
    last = segment_count - 1

    def mark_new_segments(
        lines: list[str], start: int, end: int, segment: SegmentInfo, index: int
    ) -> None:
        if first_new > last:
            return
        if index == first_new:
            lines[start] = open_marker + lines[start]
        if index == last:
            lines[end] = lines[end] + close_marker

    text = serialize(current, mark_new_segments)

    if current.media_sequence_base != previous.media_sequence_base:
        text = _wrap_directive(
            text, MEDIA_SEQUENCE_TAG, current.media_sequence_base, open_marker, close_marker
        )
    if current.discontinuity_sequence_base != previous.discontinuity_sequence_base:
        text = _wrap_directive(
            text,
            DISCONTINUITY_SEQUENCE_TAG,
            current.discontinuity_sequence_base,
            open_marker,
            close_marker,
        )
    return text


def highlight_changes(
    previous: ParsedPlaylist,
    current: ParsedPlaylist,
    open_marker: str = OPEN_MARKER,
    close_marker: str = CLOSE_MARKER,
) -> str:
    """Return the text of ``current`` with changes since ``previous`` marked.

    Master playlists are never diffed: if either side is a MasterPlaylist
    the plain serialization of ``current`` is returned. Neither input is
    modified.
    """
    if isinstance(previous, MasterPlaylist) or isinstance(current, MasterPlaylist):
        return serialize(current)
    if isinstance(current, MediaPlaylist):
        return highlight_media(previous, current, open_marker, close_marker)
    assert_never(current)
