"""
Error types raised by the session viewer.

Error Kinds:
    - MalformedInputError: the log export is not a sequence of records with
      the required fields. Raised before any reconciliation happens.
    - UnparsablePlaylistError: a non-empty manifest body is not a valid
      playlist. Raised lazily, the first time a snapshot side is parsed.
    - EmptySessionError: the log export produced no snapshot at all.
"""

from __future__ import annotations


class SessionViewerError(Exception):
    """Base class for all session viewer errors."""


class MalformedInputError(SessionViewerError, ValueError):
    """A log record is missing a required field or has an invalid value.

    Attributes:
        index: Zero-based position of the offending record, or None when the
            container itself is malformed.
    """

    def __init__(self, message: str, index: int | None = None) -> None:
        if index is not None:
            message = f"Record {index}: {message}"
        super().__init__(message)
        self.index = index


class UnparsablePlaylistError(SessionViewerError, ValueError):
    """A manifest body could not be parsed into a playlist."""


class EmptySessionError(SessionViewerError):
    """No origin/generated snapshot could be reconciled from the input."""

    def __init__(self, event_count: int = 0) -> None:
        super().__init__(
            f"No manifest snapshots found ({event_count:,} events processed)"
        )
        self.event_count = event_count
