#!/usr/bin/env python3
"""
Session Explorer

A CLI tool for inspecting a reconciled MediaTailor manifest session without
the terminal UI.

Usage:
    python -m session_viewer.main list <file>            List snapshots with summary
    python -m session_viewer.main show <file> <index>    Show a specific snapshot
    python -m session_viewer.main stats <file>           Show session statistics
    python -m session_viewer.main export <file> -o out   Export all snapshots

Export the log file from CloudWatch Logs Insights:
    Log group: MediaTailor/ManifestService
    Query:
    fields @timestamp, eventType, responseBody
    | filter sessionId = 'xxxx-xxxx-xxxx'
    | sort @timestamp asc

Supported Formats:
    - JSON (.json): Logs Insights export or get-query-results output
    - JSONL (.jsonl, .ndjson): One log record per line
    - Parquet (.parquet, .pq): Apache Parquet columnar format
"""

import argparse
import logging
import os
import sys

from session_viewer.config import DEFAULT_CONFIG
from session_viewer.errors import SessionViewerError, UnparsablePlaylistError
from session_viewer.formatters import (
    format_json,
    format_jsonl,
    format_markdown,
    snapshot_to_dict,
    write_parquet,
)
from session_viewer.playlist_codec import MasterPlaylist, MediaPlaylist
from session_viewer.session import SessionState, load_session
from session_viewer.snapshot import Side


def truncate(text: str, max_len: int = 50) -> str:
    """Truncate text with ellipsis."""
    if len(text) <= max_len:
        return text
    return text[:max_len - 3] + "..."


def line_count(text: str) -> int:
    return len(text.split("\n")) if text else 0


def describe_playlist(playlist) -> str:
    """Short description of a parsed playlist for the list view."""
    if playlist is None:
        return "-"
    if isinstance(playlist, MasterPlaylist):
        return f"master({playlist.variant_count})"
    if isinstance(playlist, MediaPlaylist):
        last = playlist.last_segment
        last_seq = last.media_sequence_number if last else "-"
        return f"seq {playlist.media_sequence_base}..{last_seq}"
    return "?"


def _session_from_args(args) -> SessionState:
    config = DEFAULT_CONFIG.with_overrides(
        swap_window_ms=args.swap_window_ms,
        highlight_after=args.highlight_after,
    )
    return load_session(args.file, config, args.input_format)


# ============== Commands ==============

def cmd_list(args):
    """List all snapshots with summary information."""
    session = _session_from_args(args)
    cache = session.cache

    header = f"{'IDX':<6} {'TIMESTAMP':<33} {'ROWS':<11} {'HL':<3} {'ORIGIN':<20} {'GENERATED'}"
    print("-" * len(header))
    print(header)
    print("-" * len(header))

    for idx, snapshot in enumerate(session.snapshots):
        descriptions = []
        for side in Side:
            try:
                descriptions.append(describe_playlist(cache.parsed(idx, snapshot, side)))
            except UnparsablePlaylistError:
                descriptions.append("invalid")

        rows = f"{line_count(snapshot.origin_text)}/{line_count(snapshot.generated_text)}"
        highlighted = "*" if snapshot.is_highlighted else ""
        print(f"{idx:<6} {snapshot.timestamp.isoformat():<33} {rows:<11} {highlighted:<3} "
              f"{truncate(descriptions[0], 20):<20} {descriptions[1]}")

        if args.limit and idx + 1 >= args.limit:
            print(f"\n... (limited to {args.limit} snapshots)")
            break

    print("-" * len(header))
    print(f"Session has {len(session):,} snapshots")


def cmd_show(args):
    """Show a specific snapshot."""
    session = _session_from_args(args)

    if args.index < 0 or args.index >= len(session):
        print(f"Error: Index {args.index} out of range (0-{len(session)-1})", file=sys.stderr)
        sys.exit(1)

    snapshot = session.snapshots[args.index]
    sides = list(Side) if args.side == "both" else [Side(args.side)]

    print(f"Snapshot {args.index}: {snapshot.timestamp.isoformat()}")
    for side in sides:
        print("=" * 60)
        print(side.label)
        print("=" * 60)
        print(snapshot.text(side) if args.raw else snapshot.display(side))


def cmd_stats(args):
    """Show session statistics."""
    session = _session_from_args(args)
    highlighted = sum(1 for snapshot in session.snapshots if snapshot.is_highlighted)
    unpaired = sum(1 for snapshot in session.snapshots if not snapshot.is_paired)

    print("=" * 60)
    print("SESSION STATISTICS")
    print("=" * 60)

    print(f"\nEvents:")
    print(f"  Total events:            {session.event_count:,}")
    print(f"  Ignored (non-manifest):  {session.ignored_count:,}")

    print(f"\nSnapshots:")
    print(f"  Total snapshots:         {len(session):,}")
    print(f"  Highlighted:             {highlighted:,}")
    print(f"  Unpaired (forced flush): {unpaired:,}")
    print(f"  Local swaps:             {session.swap_count:,}")
    print(f"  Forced flushes:          {session.forced_flush_count:,}")
    print(f"  Max manifest rows:       {session.max_rows:,}")

    if session.snapshots:
        first = session.snapshots[0].timestamp
        last = session.snapshots[-1].timestamp
        print(f"  Time span:               {first.isoformat()} -> {last.isoformat()}")

    print(f"\nParse failures:            {len(session.parse_failures):,}")
    if args.verbose:
        for failure in session.parse_failures:
            print(f"  [{failure.index}] {failure.side.value}: {truncate(failure.message, 60)}")

    print("=" * 60)


def cmd_export(args):
    """Export every snapshot in the chosen format."""
    if args.output_format == "parquet" and not args.output:
        print("Error: Parquet output requires -o/--output file", file=sys.stderr)
        sys.exit(1)

    session = _session_from_args(args)
    records = [
        snapshot_to_dict(snapshot, idx) for idx, snapshot in enumerate(session.snapshots)
    ]

    if args.output_format == "parquet":
        write_parquet(records, args.output)
        print(f"Wrote {len(records)} snapshots to {args.output}", file=sys.stderr)
        return

    output_file = None
    output = sys.stdout
    if args.output:
        output_file = open(args.output, "w", encoding="utf-8")
        output = output_file

    try:
        if args.output_format == "jsonl":
            for record in records:
                print(format_jsonl(record), file=output)
        elif args.output_format == "markdown":
            for i, snapshot in enumerate(session.snapshots):
                print(format_markdown(snapshot, i), file=output)
                if i < len(session.snapshots) - 1:
                    print("\n---\n", file=output)
        else:
            print(format_json(records, not args.compact), file=output)
    finally:
        if output_file:
            output_file.close()

    if args.output:
        print(f"Wrote {len(records)} snapshots to {args.output}", file=sys.stderr)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('file', help='Log export file (JSON, JSONL, or Parquet)')
    parser.add_argument(
        '--input-format',
        choices=['auto', 'jsonl', 'json', 'parquet'],
        default='auto',
        help='Input file format (default: auto-detect)'
    )
    parser.add_argument(
        '--swap-window-ms',
        type=int,
        default=None,
        help='Max gap for swapping near-simultaneous events (default: 100)'
    )
    parser.add_argument(
        '--highlight-after',
        type=int,
        default=None,
        help='Number of leading snapshots shown without highlighting (default: 2)'
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output and debug logging')


def main():
    parser = argparse.ArgumentParser(
        description="Session Explorer - reconcile and inspect MediaTailor manifest logs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # List command
    list_parser = subparsers.add_parser('list', help='List snapshots with summary')
    _add_common_arguments(list_parser)
    list_parser.add_argument('-n', '--limit', type=int, help='Limit number of snapshots')
    list_parser.set_defaults(func=cmd_list)

    # Show command
    show_parser = subparsers.add_parser('show', help='Show a specific snapshot')
    _add_common_arguments(show_parser)
    show_parser.add_argument('index', type=int, help='Snapshot index (0-based)')
    show_parser.add_argument(
        '--side',
        choices=['origin', 'generated', 'both'],
        default='both',
        help='Which manifest to show (default: both)'
    )
    show_parser.add_argument('--raw', action='store_true', help='Show raw text without highlighting')
    show_parser.set_defaults(func=cmd_show)

    # Stats command
    stats_parser = subparsers.add_parser('stats', help='Show session statistics')
    _add_common_arguments(stats_parser)
    stats_parser.set_defaults(func=cmd_stats)

    # Export command
    export_parser = subparsers.add_parser('export', help='Export all snapshots')
    _add_common_arguments(export_parser)
    export_parser.add_argument('-o', '--output', help='Output file (default: stdout)')
    export_parser.add_argument(
        '--output-format',
        choices=['json', 'jsonl', 'markdown', 'parquet'],
        default='json',
        help='Output format (default: json)'
    )
    export_parser.add_argument('--compact', action='store_true', help='Compact JSON output (no indentation)')
    export_parser.set_defaults(func=cmd_export)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not os.path.exists(args.file):
        print(f"Error: File not found: {args.file}", file=sys.stderr)
        sys.exit(1)

    try:
        args.func(args)
    except (SessionViewerError, ValueError) as e:
        # ValueError covers unreadable export files (unknown format, invalid JSON)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
