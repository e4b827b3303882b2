"""
MediaTailor Session Viewer.

Reconstructs the chronological sequence of origin/generated manifest pairs
from an exported session log and highlights what changed between rewrites.

Usage:
    python -m session_viewer.main list logs-insights-results.json
    python -m session_viewer.tui.app logs-insights-results.json

Components:
    - events: RawEvent validation and ordering
    - reconciler: PairReconciler and the local swap heuristic
    - highlight: structural playlist diff with bold markup
    - snapshot_cache: memoized parsed playlists
    - session: SessionState factory and NavigationStore
"""

__version__ = "0.1.0"
