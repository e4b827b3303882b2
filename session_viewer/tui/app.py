"""
Main Textual application for the Session Viewer.

This is the entry point for the TUI that steps through a MediaTailor
session, showing each origin manifest next to the ad-stitched manifest
generated from it.

Supported Formats:
    - JSON (.json): Logs Insights export or get-query-results output
    - JSONL (.jsonl, .ndjson): One log record per line
    - Parquet (.parquet, .pq): Apache Parquet columnar format
"""

import argparse
import logging
import os
import sys
from typing import Callable

from textual.app import App
from textual.binding import Binding
from textual.logging import TextualHandler

from session_viewer.config import DEFAULT_CONFIG, ViewerConfig
from session_viewer.errors import EmptySessionError, SessionViewerError
from session_viewer.log_formats import detect_format
from session_viewer.session import SessionState, build_session, load_records
from session_viewer.tui.mixins import BackgroundTaskMixin
from session_viewer.tui.views import SessionScreen

logger = logging.getLogger(__name__)


class SessionViewerApp(BackgroundTaskMixin, App):
    """A Textual app for comparing origin and generated manifests."""

    TITLE = "Session Viewer"

    CSS = """
    Screen {
        background: $surface;
    }

    Header {
        dock: top;
        height: 3;
        background: $primary;
        color: $text;
    }

    Footer {
        dock: bottom;
        height: 1;
        background: $primary-darken-2;
    }

    Static {
        width: 100%;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
    ]

    def __init__(
        self,
        path: str,
        input_format: str = "auto",
        config: ViewerConfig = DEFAULT_CONFIG,
    ):
        """Initialize the app with a log export file.

        Args:
            path: Path to the log export file.
            input_format: Format hint ('auto', 'jsonl', 'json', 'parquet').
            config: Viewer configuration.
        """
        super().__init__()
        self._path = path
        self._input_format = input_format
        self._config = config
        self.filename = os.path.basename(path)
        self.session: SessionState | None = None

    def on_mount(self) -> None:
        """Load the session, in the background for large files."""
        if self._input_format == "auto":
            try:
                file_format = detect_format(self._path)
            except ValueError as e:
                self.exit(message=f"Unsupported file format: {e}", return_code=1)
                return
        else:
            file_format = self._input_format
        self.title = f"Session Viewer - {self.filename} ({file_format})"

        if self.should_load_async(self._path):
            self._run_session_task(
                filename=self.filename,
                build_fn=self._build_session,
                on_complete=self._on_session_loaded,
                on_error=self._on_loading_error,
            )
        else:
            try:
                session = self._build_session()
            except (SessionViewerError, ValueError, OSError) as e:
                self._on_loading_error(e)
                return
            self._on_session_loaded(session)

    def _build_session(self, report: Callable[[str], None] | None = None) -> SessionState:
        """Load records and reconcile them, reporting each stage."""
        progress = None
        if report:
            report("Reading log records")

            def progress(loaded: int, total: int | None) -> None:
                report(f"Read {loaded:,} records")

        records = load_records(self._path, self._input_format, progress)
        if report:
            report(f"Reconciling {len(records):,} records")
        return build_session(records, self._config)

    def _on_session_loaded(self, session: SessionState) -> None:
        self.session = session
        self.push_screen(SessionScreen(session, self.filename))
        if session.parse_failures:
            self.notify(
                f"{len(session.parse_failures):,} manifests could not be parsed "
                "and are shown without highlighting",
                severity="warning",
            )

    def _on_loading_error(self, error: Exception) -> None:
        """Leave the app with a message when no session can be shown."""
        logger.error("Failed to load %s: %s", self._path, error)
        if isinstance(error, EmptySessionError):
            self.exit(message=str(error))
        else:
            self.exit(message=f"Error loading file: {error}", return_code=1)


def main() -> None:
    """Parse arguments and run the application."""
    parser = argparse.ArgumentParser(
        description="Step through a MediaTailor session, comparing origin and "
        "generated manifests side by side. Supports JSON, JSONL, and Parquet log exports."
    )
    parser.add_argument(
        "path",
        help="Path to the log export file (JSON, JSONL, or Parquet)",
    )
    parser.add_argument(
        "--input-format",
        choices=["auto", "jsonl", "json", "parquet"],
        default="auto",
        help="Input file format (default: auto-detect)",
    )
    parser.add_argument(
        "--swap-window-ms",
        type=int,
        default=None,
        help="Max gap for swapping near-simultaneous events (default: 100)",
    )
    parser.add_argument(
        "--highlight-after",
        type=int,
        default=None,
        help="Number of leading snapshots shown without highlighting (default: 2)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    # Verify the path exists
    if not os.path.exists(args.path):
        print(f"Error: Path not found: {args.path}", file=sys.stderr)
        sys.exit(1)

    if not os.access(args.path, os.R_OK):
        print(f"Error: Permission denied: {args.path}", file=sys.stderr)
        sys.exit(1)

    try:
        config = DEFAULT_CONFIG.with_overrides(
            swap_window_ms=args.swap_window_ms,
            highlight_after=args.highlight_after,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        handlers=[TextualHandler()],
    )

    app = SessionViewerApp(path=args.path, input_format=args.input_format, config=config)
    app.run()
    if app.return_code:
        sys.exit(app.return_code)


if __name__ == "__main__":
    main()
