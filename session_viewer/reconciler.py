"""
Pair reconciliation: turn a sorted event stream into ordered snapshots.

Origin and generated manifests are polled independently, so under load the
two log writers can emit records within the same millisecond in either
order. A strict alternation would then mis-pair them. The reconciler keeps a
single in-progress pair and, when an event collides with a side that is
already filled, first tries to swap it with the next event (if that one is
of the opposite kind and close enough in time) before giving up and
force-flushing the pending pair.

Flush Rules:
    - A pair is flushed as soon as both sides are filled.
    - A collision that cannot be resolved by a swap flushes the pending pair
      as it is, then starts a new pair with the colliding event.
    - Highlighting against the previous snapshot starts once
      ``config.highlight_after`` snapshots have been flushed.
    - A half-filled pair left at the end of the stream is dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Sequence

from session_viewer.config import DEFAULT_CONFIG, ViewerConfig
from session_viewer.errors import UnparsablePlaylistError
from session_viewer.events import RawEvent
from session_viewer.highlight import highlight_changes
from session_viewer.snapshot import Side, Snapshot
from session_viewer.snapshot_cache import SnapshotCache

logger = logging.getLogger(__name__)


def local_swap(
    events: Sequence[RawEvent], index: int, window: timedelta
) -> list[RawEvent] | None:
    """Swap the event at ``index`` with its successor when eligible.

    The successor is eligible when it is a manifest event of the opposite
    kind and its timestamp is less than ``window`` away.

    Returns:
        A reordered copy of ``events``, or None if no swap applies. The
        input sequence is never modified.

    Examples:
        Origin@100, Origin@150, Generated@180 with a 100ms window: the swap
        at index 1 yields Origin@100, Generated@180, Origin@150.
    """
    if index < 0 or index + 1 >= len(events):
        return None

    current = events[index]
    following = events[index + 1]
    if not current.kind.is_manifest or following.kind is not current.kind.opposite():
        return None
    if abs(following.timestamp - current.timestamp) >= window:
        return None

    reordered = list(events)
    reordered[index], reordered[index + 1] = following, current
    return reordered


@dataclass(frozen=True)
class ParseFailure:
    """A snapshot side whose manifest could not be parsed for diffing."""

    index: int
    side: Side
    message: str


@dataclass
class ReconcileResult:
    """Output of a reconciliation pass.

    Attributes:
        snapshots: Flushed snapshots in order.
        max_rows: Largest manifest line count seen (display sizing hint).
        parse_failures: Sides that fell back to raw text.
        swap_count: Number of local swaps performed.
        forced_flush_count: Number of collisions resolved by a forced flush.
        dropped_pending: Whether a half-filled pair was left at the end.
    """

    snapshots: list[Snapshot] = field(default_factory=list)
    max_rows: int = 0
    parse_failures: list[ParseFailure] = field(default_factory=list)
    swap_count: int = 0
    forced_flush_count: int = 0
    dropped_pending: bool = False


@dataclass
class _PendingPair:
    """The in-progress snapshot. Only the reconciler mutates it."""

    origin_text: str = ""
    generated_text: str = ""
    timestamp: datetime | None = None

    def has(self, side: Side) -> bool:
        return bool(self.origin_text if side is Side.ORIGIN else self.generated_text)

    def assign(self, side: Side, event: RawEvent) -> None:
        if side is Side.ORIGIN:
            self.origin_text = event.body
        else:
            self.generated_text = event.body
        self.timestamp = event.timestamp

    @property
    def is_empty(self) -> bool:
        return not self.origin_text and not self.generated_text

    @property
    def is_complete(self) -> bool:
        return bool(self.origin_text) and bool(self.generated_text)


class PairReconciler:
    """Reconciles sorted manifest events into snapshots.

    Args:
        config: Viewer configuration (swap window, highlight start, markers).
        cache: Parse cache used while highlighting. A fresh one is created
            when omitted.
    """

    def __init__(
        self,
        config: ViewerConfig = DEFAULT_CONFIG,
        cache: SnapshotCache | None = None,
    ) -> None:
        self.config = config
        self.cache = cache if cache is not None else SnapshotCache()
        self._pending = _PendingPair()
        self._result = ReconcileResult()
        self._failed: set[tuple[int, Side]] = set()

    def reconcile(self, events: Sequence[RawEvent]) -> ReconcileResult:
        """Run a single pass over already sorted events.

        Args:
            events: Events ordered by ``sort_events``.

        Returns:
            The reconciliation result. The input sequence is not modified.
        """
        self._pending = _PendingPair()
        self._result = ReconcileResult()
        self._failed = set()
        self.cache.clear()

        working: Sequence[RawEvent] = events
        index = 0
        while index < len(working):
            event = working[index]
            side = event.kind.side
            if side is None:
                index += 1
                continue

            if self._pending.has(side):
                swapped = local_swap(working, index, self.config.swap_window)
                if swapped is not None:
                    logger.debug(
                        "Swapped %s at %s with its successor",
                        event.kind.name,
                        event.timestamp.isoformat(),
                    )
                    working = swapped
                    self._result.swap_count += 1
                    continue
                logger.debug(
                    "Forced flush on repeated %s at %s",
                    event.kind.name,
                    event.timestamp.isoformat(),
                )
                self._result.forced_flush_count += 1
                self._flush()

            self._pending.assign(side, event)
            self._result.max_rows = max(self._result.max_rows, event.line_count)

            if self._pending.is_complete:
                self._flush()
            index += 1

        if not self._pending.is_empty:
            logger.debug("Dropping unpaired manifest at end of session")
            self._result.dropped_pending = True

        return self._result

    def _flush(self) -> None:
        """Close the pending pair, highlight it if due, and start a new one."""
        pending = self._pending
        snapshot = Snapshot(
            origin_text=pending.origin_text,
            generated_text=pending.generated_text,
            timestamp=pending.timestamp,
        )
        index = len(self._result.snapshots)
        if index >= max(self.config.highlight_after, 1):
            snapshot = self._highlight(index, snapshot)

        self._result.snapshots.append(snapshot)
        self._pending = _PendingPair()

    def _highlight(self, index: int, snapshot: Snapshot) -> Snapshot:
        """Attach markup for each side that can be diffed against the previous snapshot."""
        previous = self._result.snapshots[index - 1]
        markup: dict[str, str] = {}

        for side in Side:
            previous_playlist = self._parse(index - 1, previous, side)
            current_playlist = self._parse(index, snapshot, side)
            if previous_playlist is None or current_playlist is None:
                continue
            markup[f"{side.value}_markup"] = highlight_changes(
                previous_playlist,
                current_playlist,
                self.config.open_marker,
                self.config.close_marker,
            )

        return replace(snapshot, **markup) if markup else snapshot

    def _parse(self, index: int, snapshot: Snapshot, side: Side):
        """Parse through the cache, recording failures instead of raising."""
        try:
            return self.cache.parsed(index, snapshot, side)
        except UnparsablePlaylistError as e:
            if (index, side) not in self._failed:
                self._failed.add((index, side))
                logger.warning(
                    "Snapshot %d %s manifest is not a valid playlist: %s",
                    index,
                    side.value,
                    e,
                )
                self._result.parse_failures.append(ParseFailure(index, side, str(e)))
            return None
