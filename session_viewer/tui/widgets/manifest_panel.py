"""
ManifestPanel widget for displaying one side of a snapshot.

The panel renders a manifest with its change markup turned into bold text,
and keeps its body at least as tall as the longest manifest in the session
so stepping between snapshots does not make the layout jump.
"""

from __future__ import annotations

import re
from typing import Any

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Static

from session_viewer.config import CLOSE_MARKER, OPEN_MARKER

HIGHLIGHT_STYLE = "bold yellow"
EMPTY_PLACEHOLDER = "(no manifest)"


def markup_to_text(
    markup: str,
    open_marker: str = OPEN_MARKER,
    close_marker: str = CLOSE_MARKER,
    highlight_style: str = HIGHLIGHT_STYLE,
) -> Text:
    """Convert marked-up manifest text into a Rich Text object.

    Text between an open and a close marker is styled with highlight_style.
    A highlighted region may span several lines. Markers are not rendered.
    """
    text = Text()
    pattern = f"({re.escape(open_marker)}|{re.escape(close_marker)})"
    highlighted = False

    for chunk in re.split(pattern, markup):
        if chunk == open_marker:
            highlighted = True
        elif chunk == close_marker:
            highlighted = False
        elif chunk:
            text.append(chunk, style=highlight_style if highlighted else None)

    return text


class ManifestPanel(VerticalScroll):
    """A scrollable panel showing one manifest of the current snapshot."""

    DEFAULT_CSS = """
    ManifestPanel {
        width: 1fr;
        height: 1fr;
        border: solid $primary;
        padding: 0 1;
    }

    ManifestPanel.active {
        border: double $accent;
    }

    ManifestPanel .panel-header {
        text-style: bold;
        text-align: center;
        background: $primary-darken-1;
        margin-bottom: 1;
    }

    ManifestPanel .manifest-body {
        width: 100%;
    }
    """

    can_focus = True

    def __init__(self, title: str, **kwargs: Any) -> None:
        """Initialize the panel.

        Args:
            title: Header text, usually the manifest event type.
            **kwargs: Additional arguments passed to VerticalScroll.
        """
        super().__init__(**kwargs)
        self._title = title
        self._header = Static(title, classes="panel-header")
        self._body = Static("", classes="manifest-body")

    def compose(self) -> ComposeResult:
        yield self._header
        yield self._body

    def show(self, markup: str, rows: int = 0) -> None:
        """Display a manifest.

        Args:
            markup: Manifest text, possibly containing highlight markers.
            rows: Minimum body height in lines.
        """
        if markup:
            self._body.update(markup_to_text(markup))
        else:
            self._body.update(Text(EMPTY_PLACEHOLDER, style="dim italic"))
        self._body.styles.min_height = max(rows, 1)
        self.scroll_home(animate=False)
