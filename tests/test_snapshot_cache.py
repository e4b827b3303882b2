"""Tests for SnapshotCache in session_viewer/snapshot_cache.py."""

from __future__ import annotations

import pytest

from conftest import at, media_playlist
from session_viewer.errors import UnparsablePlaylistError
from session_viewer.playlist_codec import MediaPlaylist, parse
from session_viewer.snapshot import Side, Snapshot
from session_viewer.snapshot_cache import SnapshotCache


def make_snapshot(origin_text: str = "", generated_text: str = "") -> Snapshot:
    return Snapshot(origin_text=origin_text, generated_text=generated_text, timestamp=at(0))


class CountingParser:
    """Wraps parse() and counts calls."""

    def __init__(self):
        self.calls = 0

    def __call__(self, text):
        self.calls += 1
        return parse(text)


class TestSnapshotCache:
    """Tests for SnapshotCache.parsed()."""

    def test_parses_on_miss(self):
        cache = SnapshotCache()
        snapshot = make_snapshot(media_playlist(1, 3), media_playlist(1, 3))

        playlist = cache.parsed(0, snapshot, Side.ORIGIN)
        assert isinstance(playlist, MediaPlaylist)
        assert (0, Side.ORIGIN) in cache
        assert (0, Side.GENERATED) not in cache

    def test_parses_once(self):
        """Repeated lookups return the same object without reparsing."""
        parser = CountingParser()
        cache = SnapshotCache(parser)
        snapshot = make_snapshot(media_playlist(1, 3))

        first = cache.parsed(4, snapshot, Side.ORIGIN)
        second = cache.parsed(4, snapshot, Side.ORIGIN)

        assert first is second
        assert parser.calls == 1

    def test_sides_cached_separately(self):
        cache = SnapshotCache()
        snapshot = make_snapshot(media_playlist(1, 3), media_playlist(5, 6))

        origin_playlist = cache.parsed(0, snapshot, Side.ORIGIN)
        generated_playlist = cache.parsed(0, snapshot, Side.GENERATED)

        assert origin_playlist.media_sequence_base == 1
        assert generated_playlist.media_sequence_base == 5
        assert len(cache) == 2

    def test_empty_side_returns_none(self):
        cache = SnapshotCache()
        assert cache.parsed(0, make_snapshot(media_playlist(1, 2)), Side.GENERATED) is None
        assert len(cache) == 0

    def test_invalid_text_raises_and_is_not_cached(self):
        parser = CountingParser()
        cache = SnapshotCache(parser)
        snapshot = make_snapshot("garbage")

        with pytest.raises(UnparsablePlaylistError):
            cache.parsed(0, snapshot, Side.ORIGIN)
        with pytest.raises(UnparsablePlaylistError):
            cache.parsed(0, snapshot, Side.ORIGIN)

        assert parser.calls == 2
        assert len(cache) == 0

    def test_parses_raw_text_not_markup(self):
        """Highlighted snapshots are parsed from their raw text."""
        cache = SnapshotCache()
        snapshot = Snapshot(
            origin_text=media_playlist(1, 2),
            generated_text="",
            timestamp=at(0),
            origin_markup="<b>not a playlist</b>",
        )
        assert isinstance(cache.parsed(0, snapshot, Side.ORIGIN), MediaPlaylist)

    def test_clear(self):
        cache = SnapshotCache()
        cache.parsed(0, make_snapshot(media_playlist(1, 2)), Side.ORIGIN)
        cache.clear()
        assert len(cache) == 0

    def test_changed_text_at_same_index_reparsed(self):
        """A shared cache never returns a playlist parsed from other text."""
        parser = CountingParser()
        cache = SnapshotCache(parser)

        first = cache.parsed(2, make_snapshot(media_playlist(1, 5)), Side.ORIGIN)
        second = cache.parsed(2, make_snapshot(media_playlist(1, 12)), Side.ORIGIN)

        assert first.last_segment.uri == "seg5.ts"
        assert second.last_segment.uri == "seg12.ts"
        assert parser.calls == 2
        assert len(cache) == 1
