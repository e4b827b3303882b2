"""
Session Screen for side-by-side manifest comparison.

Displays the origin manifest on the left and the generated (ad-stitched)
manifest on the right for one snapshot at a time, with new segments and
changed sequence numbers shown in bold.
"""

from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.screen import Screen
from textual.widgets import Footer, Header, Static

from session_viewer.session import NavigationStore, SessionState
from session_viewer.snapshot import Side
from session_viewer.tui.mixins import DualPaneMixin, VimNavigationMixin
from session_viewer.tui.widgets import ManifestPanel


class SessionScreen(DualPaneMixin, VimNavigationMixin, Screen):
    """Step through the snapshots of a reconciled session."""

    CSS = """
    SessionScreen {
        layout: vertical;
    }

    #session-container {
        height: 1fr;
    }

    #left-panel {
        border-right: none;
    }

    #status-bar {
        height: 1;
        background: $primary-darken-2;
        padding: 0 1;
    }
    """

    BINDINGS = DualPaneMixin.DUAL_PANE_BINDINGS + [
        Binding("n", "next_snapshot", "Next", show=True),
        Binding("right", "next_snapshot", "Next", show=False),
        Binding("p", "prev_snapshot", "Prev", show=True),
        Binding("left", "prev_snapshot", "Prev", show=False),
        Binding("g", "first_snapshot", "First", show=False),
        Binding("G", "last_snapshot", "Last", show=False),
    ]

    def __init__(self, session: SessionState, filename: str = "") -> None:
        """Initialize the screen.

        Args:
            session: A non-empty reconciled session.
            filename: Source file name, shown in the title.

        Raises:
            EmptySessionError: If the session has no snapshots.
        """
        super().__init__()
        self.filename = filename
        self.store = NavigationStore(session, on_change=self._on_position_changed)

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="session-container"):
            yield ManifestPanel(Side.ORIGIN.label, id="left-panel")
            yield ManifestPanel(Side.GENERATED.label, id="right-panel")
        yield Static("", id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        self.title = f"Session Viewer - {self.filename}" if self.filename else "Session Viewer"
        self._update_panel_styles()
        self._focus_active_widget()
        self._render_current()

    def _on_position_changed(self, position: int) -> None:
        self._render_current()

    def _render_current(self) -> None:
        """Refresh both panels and the status line from the cursor."""
        snapshot = self.store.current()
        rows = self.store.row_hint()

        self.query_one("#left-panel", ManifestPanel).show(snapshot.origin_display, rows)
        self.query_one("#right-panel", ManifestPanel).show(snapshot.generated_display, rows)

        position = self.store.position + 1
        self.sub_title = (
            f"{snapshot.timestamp.isoformat()} | {position} / {self.store.length()}"
        )

        notes = []
        if snapshot.is_highlighted:
            notes.append("changes in bold")
        if not snapshot.is_paired:
            notes.append("unpaired")
        status = f"Snapshot {position} of {self.store.length()}"
        if notes:
            status += f" ({', '.join(notes)})"
        self.query_one("#status-bar", Static).update(status)

    def _focus_active_widget(self) -> None:
        panel_id = "#left-panel" if self.is_left_active else "#right-panel"
        self.query_one(panel_id, ManifestPanel).focus()

    def action_next_snapshot(self) -> None:
        self.store.advance()

    def action_prev_snapshot(self) -> None:
        self.store.retreat()

    def action_first_snapshot(self) -> None:
        self.store.seek(0)

    def action_last_snapshot(self) -> None:
        self.store.seek(self.store.length() - 1)
