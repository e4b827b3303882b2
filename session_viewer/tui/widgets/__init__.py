"""TUI widgets for the Session Viewer."""

from session_viewer.tui.widgets.manifest_panel import ManifestPanel, markup_to_text

__all__ = [
    "ManifestPanel",
    "markup_to_text",
]
