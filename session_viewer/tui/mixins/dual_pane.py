"""
Dual Pane Mixin for switching between the origin and generated manifest panels.

The session screen shows the origin manifest in the left panel and the
generated (ad-stitched) manifest in the right one. This mixin tracks which of
the two has focus:
- action_switch_panel(): Toggle between the origin and generated panels
- action_vim_left(): Focus the origin panel (vim h key)
- action_vim_right(): Focus the generated panel (vim l key)
- _update_panel_styles(): Mark the focused manifest panel active
- _focus_active_widget(): Abstract method subclasses must implement

Usage:
    # IMPORTANT: DualPaneMixin MUST come before VimNavigationMixin in MRO
    # so that action_vim_left/right (panel switching) takes precedence.
    class SessionScreen(DualPaneMixin, VimNavigationMixin, Screen):
        BINDINGS = DualPaneMixin.DUAL_PANE_BINDINGS + [...]

        def _focus_active_widget(self) -> None:
            # Focus the manifest panel on the active side
            ...
"""

from __future__ import annotations

from textual.binding import Binding
from textual.css.query import NoMatches


class DualPaneMixin:
    """Mixin for screens comparing the origin and generated manifests.

    Tracks whether the origin (left) or generated (right) manifest panel is
    active, so j/k scroll the manifest the user is reading. Subclasses must
    implement _focus_active_widget() to focus the ManifestPanel on that side.

    IMPORTANT: This mixin MUST come before VimNavigationMixin in the
    inheritance order so that h/l keys switch panels instead of doing nothing.

    Class Attributes:
        DUAL_PANE_BINDINGS: Manifest scrolling (j/k, home/end) plus switching
            between the origin and generated panels.
    """

    # Combined bindings: vim scrolling + panel switching
    DUAL_PANE_BINDINGS = [
        # Vim scrolling (from VimNavigationMixin)
        Binding("j", "vim_down", "Down", show=False),
        Binding("k", "vim_up", "Up", show=False),
        Binding("home", "vim_top", "Top", show=False),
        Binding("end", "vim_bottom", "Bottom", show=False),
        # Panel switching (h/l vim-style + tab)
        Binding("h", "vim_left", "Origin Panel", show=False),
        Binding("l", "vim_right", "Generated Panel", show=False),
        Binding("tab", "switch_panel", "Switch Manifest", show=True),
        Binding("q", "quit", "Quit", show=True),
    ]

    _active_panel: str = "left"
    """Active panel: 'left' is the origin manifest, 'right' the generated one."""

    @property
    def is_left_active(self) -> bool:
        return self._active_panel == "left"

    def action_switch_panel(self) -> None:
        """Toggle focus between the origin and generated manifests."""
        self._active_panel = "right" if self._active_panel == "left" else "left"
        self._update_panel_styles()
        self._focus_active_widget()

    def action_vim_left(self) -> None:
        """Focus the origin manifest panel (vim h key)."""
        if self._active_panel != "left":
            self._active_panel = "left"
            self._update_panel_styles()
            self._focus_active_widget()

    def action_vim_right(self) -> None:
        """Focus the generated manifest panel (vim l key)."""
        if self._active_panel != "right":
            self._active_panel = "right"
            self._update_panel_styles()
            self._focus_active_widget()

    def action_quit(self) -> None:
        """Exit the application."""
        self.app.exit()

    def _update_panel_styles(self) -> None:
        """Mark the focused manifest panel active and the other inactive.

        The origin manifest lives in #left-panel and the generated one in
        #right-panel. Nothing happens before the screen is composed.
        """
        try:
            left = self.query_one("#left-panel")
            right = self.query_one("#right-panel")
        except NoMatches:
            return

        for panel, is_active in [(left, self.is_left_active), (right, not self.is_left_active)]:
            panel.set_class(is_active, "active")
            panel.set_class(not is_active, "inactive")

    def _focus_active_widget(self) -> None:
        """Focus the ManifestPanel on the active side.

        Subclasses must implement this to move focus to the origin or
        generated manifest when the active panel changes.
        """
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement _focus_active_widget()"
        )
