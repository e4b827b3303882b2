"""Tests for pair reconciliation in session_viewer/reconciler.py."""

from __future__ import annotations

from datetime import timedelta

from conftest import at, generated, media_playlist, origin, other
from session_viewer.config import DEFAULT_CONFIG
from session_viewer.reconciler import PairReconciler, local_swap
from session_viewer.snapshot import Side

# Large enough that no test data reaches the highlighting stage
NO_HIGHLIGHT = DEFAULT_CONFIG.with_overrides(highlight_after=1_000_000)
WINDOW = timedelta(milliseconds=100)


def reconcile(events, config=NO_HIGHLIGHT):
    return PairReconciler(config).reconcile(events)


class TestLocalSwap:
    """Tests for the local_swap() heuristic."""

    def test_swaps_close_opposite_events(self):
        events = [origin(100, "a"), origin(150, "b"), generated(180, "c")]
        swapped = local_swap(events, 1, WINDOW)
        assert [e.body for e in swapped] == ["a", "c", "b"]

    def test_input_unchanged(self):
        """The input sequence is never reordered in place."""
        events = [origin(100, "a"), origin(150, "b"), generated(180, "c")]
        swapped = local_swap(events, 1, WINDOW)
        assert swapped is not events
        assert [e.body for e in events] == ["a", "b", "c"]

    def test_window_is_exclusive(self):
        events = [origin(0), generated(100)]
        assert local_swap(events, 0, WINDOW) is None
        assert local_swap([origin(0), generated(99)], 0, WINDOW) is not None

    def test_same_kind_not_swapped(self):
        assert local_swap([origin(0), origin(10)], 0, WINDOW) is None

    def test_other_event_not_swapped(self):
        assert local_swap([origin(0), other(10)], 0, WINDOW) is None

    def test_last_index_has_no_successor(self):
        assert local_swap([origin(0)], 0, WINDOW) is None


class TestPairing:
    """Tests for the pairing state machine."""

    def test_clean_alternation(self):
        events = [origin(0, "A"), generated(10, "B"), origin(1000, "C"), generated(1010, "D")]
        result = reconcile(events)

        assert len(result.snapshots) == 2
        assert result.snapshots[0].origin_text == "A"
        assert result.snapshots[0].generated_text == "B"
        assert result.snapshots[1].origin_text == "C"
        assert result.snapshots[1].generated_text == "D"
        assert result.swap_count == 0
        assert result.forced_flush_count == 0

    def test_generated_first_still_pairs(self):
        result = reconcile([generated(0, "B"), origin(5, "A")])
        assert len(result.snapshots) == 1
        assert result.snapshots[0].origin_text == "A"

    def test_timestamp_is_last_assigned_event(self):
        result = reconcile([origin(0), generated(40)])
        assert result.snapshots[0].timestamp == at(40)

    def test_swap_below_window(self):
        """A repeated origin followed closely by a generated event is swapped."""
        events = [
            origin(0, "o0"), generated(10, "g0"),
            origin(1000, "o1"), origin(1050, "o2"), generated(1080, "g1"),
        ]
        result = reconcile(events)

        assert result.swap_count == 1
        assert result.forced_flush_count == 0
        assert len(result.snapshots) == 2
        assert result.snapshots[1].origin_text == "o1"
        assert result.snapshots[1].generated_text == "g1"
        # o2 is left pending at the end
        assert result.dropped_pending

    def test_swap_below_window_generated_collision(self):
        """A repeated generated followed closely by an origin event is swapped."""
        events = [
            generated(0, "g0"), origin(10, "o0"),
            generated(1000, "g1"), generated(1050, "g2"), origin(1080, "o1"),
        ]
        result = reconcile(events)

        assert result.swap_count == 1
        assert result.forced_flush_count == 0
        assert len(result.snapshots) == 2
        assert result.snapshots[1].generated_text == "g1"
        assert result.snapshots[1].origin_text == "o1"
        assert result.dropped_pending

    def test_forced_flush_at_window(self):
        """A gap of exactly the window forces a flush instead of a swap."""
        events = [origin(1000, "o1"), origin(1050, "o2"), generated(1150, "g1")]
        result = reconcile(events)

        assert result.swap_count == 0
        assert result.forced_flush_count == 1
        assert len(result.snapshots) == 2

        unpaired = result.snapshots[0]
        assert unpaired.origin_text == "o1"
        assert unpaired.generated_text == ""
        assert not unpaired.is_paired

        assert result.snapshots[1].origin_text == "o2"
        assert result.snapshots[1].generated_text == "g1"
        assert not result.dropped_pending

    def test_non_manifest_events_ignored(self):
        events = [origin(0), other(1), other(2), generated(3)]
        assert len(reconcile(events).snapshots) == 1

    def test_trailing_half_pair_dropped(self):
        result = reconcile([origin(0), generated(1), origin(2)])
        assert len(result.snapshots) == 1
        assert result.dropped_pending

    def test_empty_input(self):
        result = reconcile([])
        assert result.snapshots == []
        assert result.max_rows == 0

    def test_max_rows(self):
        events = [origin(0, "a\nb\nc"), generated(1, "a\nb\nc\nd\ne")]
        assert reconcile(events).max_rows == 5

    def test_events_not_modified(self):
        events = [origin(1000, "o1"), origin(1050, "o2"), generated(1080, "g1")]
        snapshot = list(events)
        reconcile(events)
        assert events == snapshot


class TestHighlighting:
    """Tests for diff highlighting during flush."""

    def _sliding_events(self, count: int):
        events = []
        for i in range(count):
            events.append(origin(i * 1000, media_playlist(1, 3 + i)))
            events.append(generated(i * 1000 + 10, media_playlist(1, 3 + i, prefix="ad")))
        return events

    def test_first_two_snapshots_not_highlighted(self):
        result = reconcile(self._sliding_events(3), DEFAULT_CONFIG)

        assert not result.snapshots[0].is_highlighted
        assert not result.snapshots[1].is_highlighted
        assert result.snapshots[2].is_highlighted

    def test_highlight_after_is_configurable(self):
        config = DEFAULT_CONFIG.with_overrides(highlight_after=1)
        result = reconcile(self._sliding_events(2), config)
        assert result.snapshots[1].is_highlighted

    def test_raw_text_preserved(self):
        """Markup is stored beside the raw text, never in place of it."""
        events = self._sliding_events(3)
        result = reconcile(events, DEFAULT_CONFIG)

        third = result.snapshots[2]
        assert third.origin_text == events[4].body
        assert "<b>" in third.origin_display
        assert "<b>" not in third.origin_text

    def test_unparsable_manifest_falls_back_to_raw(self):
        config = DEFAULT_CONFIG.with_overrides(highlight_after=1)
        events = [
            origin(0, media_playlist(1, 3)), generated(10, media_playlist(1, 3, prefix="ad")),
            origin(1000, "not a playlist"), generated(1010, media_playlist(1, 4, prefix="ad")),
        ]
        result = reconcile(events, config)

        second = result.snapshots[1]
        assert second.origin_markup is None
        assert second.origin_display == "not a playlist"
        assert second.generated_markup is not None

        assert len(result.parse_failures) == 1
        failure = result.parse_failures[0]
        assert failure.index == 1
        assert failure.side is Side.ORIGIN

    def test_unpaired_side_not_highlighted(self):
        """An empty side after a forced flush has nothing to diff."""
        config = DEFAULT_CONFIG.with_overrides(highlight_after=1)
        events = [
            origin(0, media_playlist(1, 3)), generated(10, media_playlist(1, 3)),
            origin(1000, media_playlist(1, 4)), origin(2000, media_playlist(1, 5)),
            generated(2200, media_playlist(1, 5)),
        ]
        result = reconcile(events, config)

        forced = result.snapshots[1]
        assert not forced.is_paired
        assert forced.origin_markup is not None
        assert forced.generated_markup is None
        assert forced.generated_display == ""
        assert result.parse_failures == []

    def test_reconcile_twice_uses_new_manifests(self):
        """A second pass on the same reconciler diffs its own events."""
        reconciler = PairReconciler(DEFAULT_CONFIG)
        reconciler.reconcile(self._sliding_events(3))

        events = []
        for i, last in enumerate((10, 11, 12)):
            events.append(origin(i * 1000, media_playlist(1, last)))
            events.append(generated(i * 1000 + 10, media_playlist(1, last, prefix="ad")))
        second = reconciler.reconcile(events)

        third = second.snapshots[2]
        assert "seg12.ts</b>" in third.origin_display
        assert "seg5.ts</b>" not in third.origin_display
        assert "ad12.ts</b>" in third.generated_display
