"""Reusable screen components for the TUI application."""

from session_viewer.tui.screens.progress import (
    ProgressScreen,
    LoadingScreen,
)

__all__ = [
    "ProgressScreen",
    "LoadingScreen",
]
