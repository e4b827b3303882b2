"""Reusable mixins for TUI screens and the application."""

from session_viewer.tui.mixins.background_task import BackgroundTaskMixin
from session_viewer.tui.mixins.dual_pane import DualPaneMixin
from session_viewer.tui.mixins.vim_navigation import VimNavigationMixin

__all__ = [
    "BackgroundTaskMixin",
    "DualPaneMixin",
    "VimNavigationMixin",
]
