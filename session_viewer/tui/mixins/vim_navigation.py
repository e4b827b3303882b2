"""
Vim Navigation Mixin for vim-style scrolling keybindings.

Provides j/k scrolling that works on the focused manifest panel (or any
other scrollable widget), plus home/end to jump to the top or bottom.

Note: h/l bindings for panel switching are defined in DualPaneMixin, and
g/G move between snapshots on the session screen.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from textual.binding import Binding
from textual.containers import ScrollableContainer

if TYPE_CHECKING:
    from textual.widget import Widget


class VimNavigationMixin:
    """Mixin providing vim-style scrolling keybindings.

    This mixin adds keybindings that delegate to the focused widget:
    - j/k: Scroll down/up one line
    - home/end: Scroll to top/bottom

    Usage:
        class MyScreen(VimNavigationMixin, Screen):
            BINDINGS = VimNavigationMixin.VIM_BINDINGS + [...]

        # For dual-pane screens (DualPaneMixin MUST come first for h/l to work):
        class MyDualScreen(DualPaneMixin, VimNavigationMixin, Screen):
            BINDINGS = DualPaneMixin.DUAL_PANE_BINDINGS + [...]
    """

    VIM_BINDINGS = [
        Binding("j", "vim_down", "Down", show=False),
        Binding("k", "vim_up", "Up", show=False),
        Binding("home", "vim_top", "Top", show=False),
        Binding("end", "vim_bottom", "Bottom", show=False),
    ]

    def _get_scrollable_widget(self) -> Widget | None:
        """Get the currently focused widget if it can scroll.

        Returns:
            The focused widget if it's a ScrollableContainer, otherwise None.
        """
        focused = self.focused
        if isinstance(focused, ScrollableContainer):
            return focused
        return None

    def action_vim_down(self) -> None:
        """Scroll down one line (vim j key)."""
        widget = self._get_scrollable_widget()
        if widget is not None:
            widget.scroll_down(animate=False)

    def action_vim_up(self) -> None:
        """Scroll up one line (vim k key)."""
        widget = self._get_scrollable_widget()
        if widget is not None:
            widget.scroll_up(animate=False)

    def action_vim_top(self) -> None:
        """Scroll to the first line."""
        widget = self._get_scrollable_widget()
        if widget is not None:
            widget.scroll_home(animate=False)

    def action_vim_bottom(self) -> None:
        """Scroll to the last line."""
        widget = self._get_scrollable_widget()
        if widget is not None:
            widget.scroll_end(animate=False)
