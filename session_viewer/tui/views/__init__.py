"""Screen views for the TUI application."""

from session_viewer.tui.views.session_screen import SessionScreen

__all__ = ["SessionScreen"]
