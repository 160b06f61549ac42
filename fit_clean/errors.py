"""Exceptions raised when a track cannot be cleaned."""

from __future__ import annotations

from fit_clean.models import TrackPoint


class TrackCleanError(Exception):
    """Base exception for fatal track cleaning failures."""


class MissingSessionSummaryError(TrackCleanError):
    """No session message with a total distance; the bucket width cannot be derived."""


class SpeedNotRecoveringError(TrackCleanError):
    """Too many consecutive points were rejected against the same anchor."""

    def __init__(self, message: str, anchor: TrackPoint | None = None, rejections: int = 0):
        super().__init__(message)
        self.anchor = anchor
        self.rejections = rejections


class FitDecodeError(TrackCleanError):
    """The input file could not be decoded as FIT."""
