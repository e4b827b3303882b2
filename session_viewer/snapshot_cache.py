"""
Memoized parsed playlists, keyed by snapshot position and side.

Each snapshot side is parsed at most once per successful parse. An entry
remembers the raw text it was parsed from and is only reused for that same
text, so a cache shared between sessions never serves another session's
playlist. For the same text the first committed result wins, and repeated or
concurrent lookups observe the same immutable playlist object.
"""

from __future__ import annotations

import threading
from typing import Callable

from session_viewer import playlist_codec
from session_viewer.playlist_codec import ParsedPlaylist
from session_viewer.snapshot import Side, Snapshot


class SnapshotCache:
    """Lazy parse cache for snapshot manifests.

    Args:
        parser: Function turning manifest text into a ParsedPlaylist.
            Defaults to ``playlist_codec.parse``.
    """

    def __init__(self, parser: Callable[[str], ParsedPlaylist] | None = None) -> None:
        self._parser = parser or playlist_codec.parse
        self._entries: dict[tuple[int, Side], tuple[str, ParsedPlaylist]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: tuple[int, Side]) -> bool:
        return key in self._entries

    def parsed(self, index: int, snapshot: Snapshot, side: Side) -> ParsedPlaylist | None:
        """Return the parsed playlist for one side of a snapshot.

        Args:
            index: Position of the snapshot in the session.
            snapshot: The snapshot whose raw text is parsed on a miss.
            side: Which manifest to return.

        Returns:
            The cached or freshly parsed playlist, or None when the side has
            no manifest text.

        Raises:
            UnparsablePlaylistError: If the text is not a valid playlist.
        """
        key = (index, side)
        text = snapshot.text(side)
        cached = self._entries.get(key)
        if cached is not None and cached[0] == text:
            return cached[1]

        if not text:
            return None

        playlist = self._parser(text)
        with self._lock:
            current = self._entries.get(key)
            if current is not None and current[0] == text:
                return current[1]
            # A different manifest at this position replaces the stale entry
            self._entries[key] = (text, playlist)
            return playlist

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
