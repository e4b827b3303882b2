"""
Playlist codec: parse HLS manifest text and serialize it back.

Parsing and serialization are done by the ``m3u8`` library. This module
adapts its output into an explicit two-variant type (MasterPlaylist or
MediaPlaylist) and adds a per-segment hook to serialization, so callers can
decorate the lines emitted for each segment.

Hook Signature:
    hook(lines, start, end, segment, index)

    - lines: mutable list of every emitted line (no trailing newlines)
    - start, end: inclusive line indices of this segment's block
    - segment: the SegmentInfo being emitted
    - index: zero-based segment position in the playlist
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Union

import m3u8

from session_viewer.errors import UnparsablePlaylistError

logger = logging.getLogger(__name__)


MEDIA_SEQUENCE_TAG = "#EXT-X-MEDIA-SEQUENCE:"
DISCONTINUITY_SEQUENCE_TAG = "#EXT-X-DISCONTINUITY-SEQUENCE:"

# Tags that m3u8 writes inside a segment block, ahead of the segment URI.
# Matched on the full tag name: "#EXT-X-DISCONTINUITY" must not match the
# playlist level "#EXT-X-DISCONTINUITY-SEQUENCE" header.
SEGMENT_TAGS = frozenset({
    "#EXTINF",
    "#EXT-X-BYTERANGE",
    "#EXT-X-DISCONTINUITY",
    "#EXT-X-KEY",
    "#EXT-X-MAP",
    "#EXT-X-PROGRAM-DATE-TIME",
    "#EXT-X-DATERANGE",
    "#EXT-X-GAP",
    "#EXT-X-BITRATE",
    "#EXT-X-PART",
    "#EXT-X-CUE-OUT",
    "#EXT-X-CUE-OUT-CONT",
    "#EXT-X-CUE-IN",
    "#EXT-X-CUE-SPAN",
    "#EXT-X-ASSET",
    "#EXT-X-SCTE35",
    "#EXT-OATCLS-SCTE35",
})

# Playlist level tags that m3u8 writes after the last segment
TRAILING_TAG_PREFIXES = (
    "#EXT-X-ENDLIST",
    "#EXT-X-PRELOAD-HINT",
    "#EXT-X-RENDITION-REPORT",
)


@dataclass(frozen=True)
class SegmentInfo:
    """A media segment with its position on the stream timeline.

    Attributes:
        media_sequence_number: Media sequence base plus segment index.
        uri: Segment URI as written in the playlist (None for partial-only
            segments of low latency playlists).
        duration: EXTINF duration in seconds, if any.
        discontinuity: Whether an EXT-X-DISCONTINUITY precedes the segment.
    """

    media_sequence_number: int
    uri: str | None
    duration: float | None = None
    discontinuity: bool = False


@dataclass(frozen=True, eq=False)
class MasterPlaylist:
    """A variant selection playlist. Its structure is never diffed."""

    source: m3u8.M3U8

    @property
    def variant_count(self) -> int:
        return len(self.source.playlists)


@dataclass(frozen=True, eq=False)
class MediaPlaylist:
    """A segment timeline playlist.

    Attributes:
        source: The parsed m3u8 object used for serialization.
        segments: Segments in playlist order.
        media_sequence_base: EXT-X-MEDIA-SEQUENCE value (0 if absent).
        discontinuity_sequence_base: EXT-X-DISCONTINUITY-SEQUENCE value
            (0 if absent).
    """

    source: m3u8.M3U8
    segments: tuple[SegmentInfo, ...]
    media_sequence_base: int
    discontinuity_sequence_base: int

    @property
    def last_segment(self) -> SegmentInfo | None:
        return self.segments[-1] if self.segments else None


ParsedPlaylist = Union[MasterPlaylist, MediaPlaylist]

SegmentHook = Callable[[list[str], int, int, SegmentInfo, int], None]


# Leading characters tolerated before the #EXTM3U header
_LEADING_NOISE = "\ufeff \t\r\n"


def parse(text: str) -> ParsedPlaylist:
    """Parse manifest text into a MasterPlaylist or MediaPlaylist.

    Raises:
        UnparsablePlaylistError: If the text is not an HLS playlist.

    Examples:
        >>> playlist = parse("#EXTM3U\\n#EXT-X-MEDIA-SEQUENCE:5\\n#EXTINF:6,\\na.ts\\n")
        >>> playlist.segments[0].media_sequence_number
        5
    """
    text = text.lstrip(_LEADING_NOISE)
    if not text.startswith("#EXTM3U"):
        raise UnparsablePlaylistError("Manifest does not start with #EXTM3U")

    try:
        source = m3u8.loads(text)
    except Exception as e:
        raise UnparsablePlaylistError(f"Invalid manifest: {e}") from e

    if source.is_variant:
        return MasterPlaylist(source=source)

    media_sequence_base = int(source.media_sequence or 0)
    discontinuity_sequence_base = int(source.discontinuity_sequence or 0)
    segments = tuple(
        SegmentInfo(
            media_sequence_number=media_sequence_base + index,
            uri=segment.uri,
            duration=segment.duration,
            discontinuity=bool(segment.discontinuity),
        )
        for index, segment in enumerate(source.segments)
    )
    return MediaPlaylist(
        source=source,
        segments=segments,
        media_sequence_base=media_sequence_base,
        discontinuity_sequence_base=discontinuity_sequence_base,
    )


def is_segment_tag(line: str) -> bool:
    """Return True if ``line`` is a tag that belongs to a segment block."""
    return line.split(":", 1)[0] in SEGMENT_TAGS


def _first_segment_start(lines: list[str], uri_line: int) -> int:
    """Walk back from the first URI line over segment level tags."""
    start = uri_line
    while start > 0 and is_segment_tag(lines[start - 1]):
        start -= 1
    return start


def _segment_end(lines: list[str], start: int, uri: str | None) -> int:
    """Find the last line of the segment block beginning at ``start``."""
    if uri:
        for index in range(start, len(lines)):
            if lines[index] == uri:
                return index
    # No URI line: the block runs until playlist level trailing tags
    end = start
    for index in range(start, len(lines)):
        if lines[index].startswith(TRAILING_TAG_PREFIXES):
            break
        end = index
    return end


def segment_spans(lines: list[str], playlist: MediaPlaylist) -> list[tuple[int, int]]:
    """Return inclusive (start, end) line spans, one per segment."""
    spans: list[tuple[int, int]] = []
    cursor = 0
    for index, segment in enumerate(playlist.segments):
        end = _segment_end(lines, cursor, segment.uri)
        start = _first_segment_start(lines, end) if index == 0 else cursor
        spans.append((start, max(start, end)))
        cursor = end + 1
    return spans


def serialize(playlist: ParsedPlaylist, hook: SegmentHook | None = None) -> str:
    """Serialize a playlist back to text.

    When a hook is given and the playlist is a MediaPlaylist, the hook is
    called once per segment, in order, and may edit the emitted lines in
    place. The playlist itself is never modified.
    """
    lines = playlist.source.dumps().rstrip("\n").split("\n")

    if hook is not None and isinstance(playlist, MediaPlaylist):
        for index, (start, end) in enumerate(segment_spans(lines, playlist)):
            hook(lines, start, end, playlist.segments[index], index)

    return "\n".join(lines)
