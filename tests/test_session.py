"""End-to-end tests for session building and navigation in session_viewer/session.py."""

from __future__ import annotations

import pytest

from conftest import at, log_record, write_jsonl
from session_viewer.errors import EmptySessionError, MalformedInputError
from session_viewer.session import (
    NavigationStore,
    SessionState,
    build_session,
    load_records,
    load_session,
)
from session_viewer.snapshot import Side
from session_viewer.snapshot_cache import SnapshotCache


@pytest.fixture
def simple_records():
    """Four events, two pairs, delivered out of order."""
    return [
        log_record(1010, "GENERATED_MANIFEST", "D\n2\n3\n4\n5"),
        log_record(0, "ORIGIN_MANIFEST", "A"),
        log_record(10, "GENERATED_MANIFEST", "B\n2"),
        log_record(1000, "ORIGIN_MANIFEST", "C"),
    ]


class TestBuildSession:
    """Tests for build_session()."""

    def test_two_snapshots(self, simple_records):
        session = build_session(simple_records)

        assert len(session) == 2
        assert session.max_rows == 5
        assert session.snapshots[1].origin_text == "C"
        assert session.snapshots[1].generated_text.startswith("D")
        assert session.event_count == 4
        assert session.ignored_count == 0

    def test_ignored_events_counted(self, simple_records):
        simple_records.append(log_record(500, "AD_MARKER_FOUND"))
        session = build_session(simple_records)
        assert session.ignored_count == 1
        assert len(session) == 2

    def test_empty_input(self):
        with pytest.raises(EmptySessionError):
            build_session([])

    def test_no_manifest_events(self):
        with pytest.raises(EmptySessionError) as exc_info:
            build_session([log_record(0, "AD_MARKER_FOUND"), log_record(5, "OTHER")])
        assert exc_info.value.event_count == 2

    def test_single_unpaired_manifest(self):
        """A lone manifest is dropped at the end, leaving nothing to show."""
        with pytest.raises(EmptySessionError):
            build_session([log_record(0, "ORIGIN_MANIFEST", "A")])

    def test_malformed_record(self, simple_records):
        simple_records.append({"eventType": "ORIGIN_MANIFEST", "responseBody": "x"})
        with pytest.raises(MalformedInputError):
            build_session(simple_records)

    def test_non_list_input(self):
        with pytest.raises(MalformedInputError):
            build_session({"@timestamp": "2023-08-01 12:00:00.000"})

    def test_highlighting_end_to_end(self, session_records):
        session = build_session(session_records)

        assert len(session) == 3
        assert not session.snapshots[1].is_highlighted
        third = session.snapshots[2]
        assert "<b>" in third.origin_display
        assert "seg5.ts</b>" in third.origin_display
        assert "ad5.ts</b>" in third.generated_display
        assert session.parse_failures == ()

    def test_session_keeps_parse_cache(self, session_records):
        """Playlists parsed while highlighting stay available on the session."""
        cache = SnapshotCache()
        session = build_session(session_records, cache=cache)

        assert session.cache is cache
        assert (2, Side.ORIGIN) in session.cache
        assert (2, Side.GENERATED) in session.cache
        entries = len(session.cache)
        session.cache.parsed(2, session.snapshots[2], Side.ORIGIN)
        assert len(session.cache) == entries

    def test_default_cache_created(self, session_records):
        assert (2, Side.ORIGIN) in build_session(session_records).cache

    def test_query_results_rows(self):
        """get-query-results rows are normalized before validation."""
        rows = [
            [
                {"field": "@timestamp", "value": "2023-08-01 12:00:00.000"},
                {"field": "eventType", "value": "ORIGIN_MANIFEST"},
                {"field": "responseBody", "value": "A"},
            ],
            [
                {"field": "@timestamp", "value": "2023-08-01 12:00:00.010"},
                {"field": "eventType", "value": "GENERATED_MANIFEST"},
                {"field": "responseBody", "value": "B"},
            ],
        ]
        session = build_session(rows)
        assert session.snapshots[0].timestamp == at(10)


class TestLoadSession:
    """Tests for load_session() and load_records()."""

    def test_load_json(self, session_file):
        session = load_session(str(session_file))
        assert isinstance(session, SessionState)
        assert len(session) == 3

    def test_load_jsonl_with_format_hint(self, tmp_path, simple_records):
        path = tmp_path / "events.txt"
        write_jsonl(path, simple_records)

        session = load_session(str(path), input_format="jsonl")
        assert len(session) == 2

    def test_progress_callback(self, session_file):
        calls = []
        records = load_records(str(session_file), progress_callback=lambda n, t: calls.append((n, t)))
        assert calls[-1] == (len(records), len(records))


class TestNavigationStore:
    """Tests for NavigationStore."""

    @pytest.fixture
    def store(self, session_records):
        return NavigationStore(build_session(session_records))

    def test_starts_at_zero(self, store):
        assert store.position == 0
        assert store.length() == 3
        assert store.current() is store.session.snapshots[0]

    def test_advance_clamps(self, store):
        for _ in range(5):
            store.advance()
        assert store.position == 2

    def test_retreat_clamps(self, store):
        store.retreat()
        assert store.position == 0

    def test_seek(self, store):
        snapshot = store.seek(2)
        assert store.position == 2
        assert snapshot is store.session.snapshots[2]

    def test_seek_out_of_range_keeps_position(self, store):
        store.seek(1)
        assert store.seek(3) is store.session.snapshots[1]
        assert store.seek(-1) is store.session.snapshots[1]
        assert store.position == 1

    def test_row_hint(self, store):
        assert store.row_hint() == store.session.max_rows
        assert store.row_hint() > 0

    def test_on_change_only_on_move(self, session_records):
        moves = []
        store = NavigationStore(build_session(session_records), on_change=moves.append)

        store.retreat()
        store.advance()
        store.advance()
        store.advance()
        store.seek(2)
        assert moves == [1, 2]

    def test_empty_session_rejected(self):
        with pytest.raises(EmptySessionError):
            NavigationStore(SessionState(snapshots=(), max_rows=0))
