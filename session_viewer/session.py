"""
Session state and navigation.

A session is built once from the exported log records and handed by
reference to whatever presents it. Nothing here is module-level state:
build_session() returns an immutable SessionState, and a NavigationStore
wraps it with a cursor.

Usage:
    from session_viewer.session import NavigationStore, load_session

    store = NavigationStore(load_session("logs.json"))
    store.advance()
    print(store.current().origin_display)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from session_viewer.config import DEFAULT_CONFIG, ViewerConfig
from session_viewer.errors import EmptySessionError
from session_viewer.events import events_from_records, sort_events
from session_viewer.log_formats import get_loader, get_loader_for_format, normalize_record
from session_viewer.reconciler import PairReconciler, ParseFailure
from session_viewer.snapshot import Snapshot
from session_viewer.snapshot_cache import SnapshotCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionState:
    """Everything the presentation layer needs about one session.

    Attributes:
        snapshots: Reconciled snapshots in chronological order.
        max_rows: Largest manifest line count (display sizing hint).
        parse_failures: Snapshot sides shown as raw text because their
            manifest could not be parsed.
        event_count: Number of log records processed.
        ignored_count: Number of records that were not manifest events.
        swap_count: Collisions resolved by swapping adjacent events.
        forced_flush_count: Collisions resolved by a forced flush.
        cache: Parsed playlists filled while highlighting, reusable by
            anything that needs a snapshot side parsed again.
    """

    snapshots: tuple[Snapshot, ...]
    max_rows: int
    parse_failures: tuple[ParseFailure, ...] = ()
    event_count: int = 0
    ignored_count: int = 0
    swap_count: int = 0
    forced_flush_count: int = 0
    cache: SnapshotCache = field(default_factory=SnapshotCache, compare=False, repr=False)

    def __len__(self) -> int:
        return len(self.snapshots)


def build_session(
    records: Iterable[dict[str, Any]],
    config: ViewerConfig = DEFAULT_CONFIG,
    cache: SnapshotCache | None = None,
) -> SessionState:
    """Reconcile exported log records into a session.

    Args:
        records: Log records, in any order and in any supported export shape.
        config: Viewer configuration.
        cache: Optional parse cache to reuse.

    Returns:
        The reconciled session.

    Raises:
        MalformedInputError: If any record is invalid. Nothing is processed.
        EmptySessionError: If no snapshot could be reconciled.
    """
    if isinstance(records, (str, bytes, dict)):
        normalized: Any = records
    else:
        normalized = [normalize_record(record, config) for record in records]
    events = events_from_records(normalized, config)
    ordered = sort_events(events)

    reconciler = PairReconciler(config, cache)
    result = reconciler.reconcile(ordered)
    if not result.snapshots:
        raise EmptySessionError(len(events))

    ignored = sum(1 for event in events if not event.kind.is_manifest)
    logger.info(
        "Reconciled %d snapshots from %d events (%d ignored, %d swaps, %d forced flushes)",
        len(result.snapshots),
        len(events),
        ignored,
        result.swap_count,
        result.forced_flush_count,
    )
    return SessionState(
        snapshots=tuple(result.snapshots),
        max_rows=result.max_rows,
        parse_failures=tuple(result.parse_failures),
        event_count=len(events),
        ignored_count=ignored,
        swap_count=result.swap_count,
        forced_flush_count=result.forced_flush_count,
        cache=reconciler.cache,
    )


def load_records(
    filename: str,
    input_format: str = "auto",
    progress_callback: Callable[[int, int | None], None] | None = None,
) -> list[dict[str, Any]]:
    """Load all raw records from a log export file.

    Args:
        filename: Path to the export file.
        input_format: Format hint ('auto', 'jsonl', 'json', 'parquet').
        progress_callback: Optional callback(loaded_count, total_count).
    """
    if input_format == "auto":
        loader = get_loader(filename)
    else:
        loader = get_loader_for_format(input_format)
    return loader.load_all(filename, progress_callback=progress_callback)


def load_session(
    filename: str,
    config: ViewerConfig = DEFAULT_CONFIG,
    input_format: str = "auto",
) -> SessionState:
    """Load a log export file and reconcile it into a session."""
    return build_session(load_records(filename, input_format), config)


class NavigationStore:
    """Cursor over the snapshots of a session.

    The cursor always stays within ``[0, length - 1]``.
    """

    def __init__(
        self,
        session: SessionState,
        on_change: Callable[[int], None] | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            session: A non-empty session.
            on_change: Optional callback invoked with the new position
                whenever the cursor moves.

        Raises:
            EmptySessionError: If the session has no snapshots.
        """
        if not session.snapshots:
            raise EmptySessionError(session.event_count)
        self._session = session
        self._position = 0
        self._on_change = on_change

    @property
    def session(self) -> SessionState:
        return self._session

    @property
    def position(self) -> int:
        return self._position

    def _move_to(self, position: int) -> None:
        if position != self._position:
            self._position = position
            if self._on_change is not None:
                self._on_change(position)

    def current(self) -> Snapshot:
        """Return the snapshot under the cursor."""
        return self._session.snapshots[self._position]

    def seek(self, position: int) -> Snapshot:
        """Move to ``position`` if it is in range; return the current snapshot.

        Out of range positions leave the cursor where it is.
        """
        if 0 <= position < self.length():
            self._move_to(position)
        return self.current()

    def advance(self) -> None:
        """Move forward by one, stopping at the last snapshot."""
        self._move_to(min(self._position + 1, self.length() - 1))

    def retreat(self) -> None:
        """Move backward by one, stopping at the first snapshot."""
        self._move_to(max(self._position - 1, 0))

    def length(self) -> int:
        return len(self._session.snapshots)

    def row_hint(self) -> int:
        return self._session.max_rows
