"""
Background Task Mixin for building a session with progress feedback.

Provides a reusable pattern for:
- Pushing a loading screen
- Loading and reconciling a log export in a background thread
- Reporting stage changes from the background thread
- Handing the session (or the error) back to the UI thread
- Dismissing the loading screen
"""

from __future__ import annotations

import os
import time
from typing import TYPE_CHECKING, Callable

from textual import work

if TYPE_CHECKING:
    from session_viewer.session import SessionState
    from session_viewer.tui.screens.progress import ProgressScreen


# build_fn(report_status) -> SessionState
SessionBuilder = Callable[[Callable[[str], None]], "SessionState"]


class BackgroundTaskMixin:
    """Mixin providing background session loading with a progress UI.

    Usage:
        class MyApp(BackgroundTaskMixin, App):
            def on_mount(self):
                self._run_session_task(
                    filename="logs.json",
                    build_fn=lambda report: load_session("logs.json"),
                    on_complete=self._on_session_ready,
                    on_error=self._on_session_error,
                )
    """

    # Configurable delays
    TASK_COMPLETION_DELAY: float = 0.5
    TASK_ERROR_DELAY: float = 2.0

    # Exports above this size are loaded in a worker (20 MB)
    LARGE_FILE_THRESHOLD: int = 20 * 1024 * 1024

    def _run_session_task(
        self,
        filename: str,
        build_fn: SessionBuilder,
        on_complete: Callable[["SessionState"], None],
        on_error: Callable[[Exception], None] | None = None,
    ) -> None:
        """Run a session build with a loading screen.

        Args:
            filename: Name of file being loaded (for display).
            build_fn: Builds the session; receives a status reporting callback.
            on_complete: Called with the session on success.
            on_error: Called with the exception on failure.
        """
        from session_viewer.tui.screens.progress import LoadingScreen

        screen = LoadingScreen(filename=filename)
        self.app.push_screen(screen)
        self._run_session_worker(screen, build_fn, on_complete, on_error)

    @work(thread=True)
    def _run_session_worker(
        self,
        screen: "ProgressScreen",
        build_fn: SessionBuilder,
        on_complete: Callable[["SessionState"], None],
        on_error: Callable[[Exception], None] | None,
    ) -> None:
        """Background worker for session builds."""

        def report(status: str) -> None:
            self.app.call_from_thread(screen.update_status, status)

        try:
            session = build_fn(report)

            self.app.call_from_thread(
                screen.set_complete, f"Reconciled {len(session):,} snapshots"
            )
            time.sleep(self.TASK_COMPLETION_DELAY)
            self.app.call_from_thread(self.app.pop_screen)
            self.app.call_from_thread(on_complete, session)

        except Exception as e:
            self.app.call_from_thread(screen.set_error, f"Error: {e}")
            time.sleep(self.TASK_ERROR_DELAY)
            self.app.call_from_thread(self.app.pop_screen)

            if on_error:
                self.app.call_from_thread(on_error, e)

    @staticmethod
    def should_load_async(file_path: str, threshold: int | None = None) -> bool:
        """Check if a file should be loaded asynchronously based on size.

        Args:
            file_path: Path to the file.
            threshold: Size threshold in bytes. Uses LARGE_FILE_THRESHOLD if None.

        Returns:
            True if file is larger than threshold.
        """
        if threshold is None:
            threshold = BackgroundTaskMixin.LARGE_FILE_THRESHOLD

        try:
            return os.path.getsize(file_path) > threshold
        except OSError:
            return False
