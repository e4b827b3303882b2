"""
Progress screens shown while a session is built in the background.

Large log exports are loaded and reconciled on a worker thread.
ProgressScreen shows the current stage and LoadingScreen names the export
being loaded.
"""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Center, Middle
from textual.screen import Screen
from textual.widgets import Footer, Header, Static


class ProgressScreen(Screen):
    """Screen reporting the stages of a background session build.

    The worker reports each stage (reading records, reconciling manifests)
    in the status line.

    Usage:
        screen = ProgressScreen(title="Working...")
        screen.update_status("Sorting events")
        screen.set_complete("Done!", "40 snapshots")
    """

    DEFAULT_CSS = """
    .progress-container {
        width: 60;
        height: auto;
        border: round $primary;
        padding: 1 2;
    }

    .progress-title {
        text-style: bold;
        text-align: center;
    }

    .progress-status, .progress-detail {
        text-align: center;
        color: $text-muted;
    }
    """

    TITLE_DEFAULT: str = "Processing..."

    def __init__(
        self,
        title: str | None = None,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        """Initialize the progress screen.

        Args:
            title: Title text to display. Uses TITLE_DEFAULT if not provided.
            name: Optional screen name.
            id: Optional screen ID.
            classes: Optional CSS classes.
        """
        super().__init__(name=name, id=id, classes=classes)
        self._title_text = title or self.TITLE_DEFAULT
        self._status_text = "Preparing..."
        self._detail_text = ""

    def compose(self) -> ComposeResult:
        """Compose the progress screen layout."""
        yield Header()
        with Center():
            with Middle(id=self._get_container_id(), classes="progress-container"):
                yield Static(self._title_text, id="progress-title", classes="progress-title")
                yield Static(self._status_text, id="progress-status", classes="progress-status")
                yield Static(self._detail_text, id="progress-detail", classes="progress-detail")
        yield Footer()

    def _get_container_id(self) -> str:
        """Return the container ID. Override in subclasses for custom CSS."""
        return "progress-container"

    def _update_static(self, selector: str, text: str) -> None:
        # The screen may not be mounted yet when a fast worker reports
        if self.is_mounted:
            self.query_one(selector, Static).update(text)

    def update_status(self, status: str) -> None:
        """Update the main status message."""
        self._status_text = status
        self._update_static("#progress-status", status)

    def update_detail(self, detail: str) -> None:
        """Update the detail text."""
        self._detail_text = detail
        self._update_static("#progress-detail", detail)

    def set_complete(self, message: str, detail: str = "") -> None:
        """Show completion state."""
        self._update_static("#progress-title", "Complete")
        self.update_status(message)
        self.update_detail(detail)

    def set_error(self, message: str, detail: str = "") -> None:
        """Show error state."""
        self._update_static("#progress-title", "Error")
        self.update_status(message)
        self.update_detail(detail)


class LoadingScreen(ProgressScreen):
    """Screen displayed while a log export is loaded and reconciled."""

    TITLE_DEFAULT = "Loading..."

    def __init__(
        self,
        filename: str = "",
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        """Initialize loading screen.

        Args:
            filename: Name of file being loaded (for display).
            name: Optional screen name.
            id: Optional screen ID.
            classes: Optional CSS classes.
        """
        title = f"Loading {filename}..." if filename else "Loading..."
        super().__init__(title=title, name=name, id=id, classes=classes)
        self.filename = filename

    def _get_container_id(self) -> str:
        return "loading-container"
