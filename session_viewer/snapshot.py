"""
Snapshot model: one reconciled, timestamped origin/generated manifest pair.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Side(Enum):
    """Role of a manifest within a snapshot."""

    ORIGIN = "origin"
    GENERATED = "generated"

    @property
    def label(self) -> str:
        """Event type style label shown above each panel."""
        return f"{self.name}_MANIFEST"


@dataclass(frozen=True)
class Snapshot:
    """A paired origin and generated manifest.

    Raw manifest text is kept untouched so it can always be parsed again.
    The markup fields hold the highlighted rendering once a diff against the
    previous snapshot has been computed.

    Attributes:
        origin_text: Raw origin manifest body ("" if never seen).
        generated_text: Raw generated manifest body ("" if never seen).
        timestamp: Timestamp of the last event assigned to the pair.
        origin_markup: Highlighted origin text, or None if not diffed.
        generated_markup: Highlighted generated text, or None if not diffed.
    """

    origin_text: str
    generated_text: str
    timestamp: datetime
    origin_markup: str | None = None
    generated_markup: str | None = None

    @property
    def is_paired(self) -> bool:
        """True when both sides carry a manifest."""
        return bool(self.origin_text) and bool(self.generated_text)

    @property
    def is_highlighted(self) -> bool:
        return self.origin_markup is not None or self.generated_markup is not None

    @property
    def origin_display(self) -> str:
        return self.display(Side.ORIGIN)

    @property
    def generated_display(self) -> str:
        return self.display(Side.GENERATED)

    def text(self, side: Side) -> str:
        """Return the raw manifest text for a side."""
        return self.origin_text if side is Side.ORIGIN else self.generated_text

    def markup(self, side: Side) -> str | None:
        return self.origin_markup if side is Side.ORIGIN else self.generated_markup

    def display(self, side: Side) -> str:
        """Return the text to show for a side: markup if present, else raw."""
        markup = self.markup(side)
        return markup if markup is not None else self.text(side)
